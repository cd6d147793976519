# Supabase tables: users
# Token validation is delegated to Supabase Auth (auth.users); this table
# holds the application's own user row, upserted on every new token.

"""
Expected Supabase table structure:

users:
- id: bigint identity (primary key)
- open_id: text (unique, not null) - external identity (Supabase Auth user id)
- name: text (nullable)
- email: text (nullable)
- login_method: text (nullable) - OAuth provider reported by Supabase Auth
- role: text (not null, default: 'user') - values: user, admin
- notification_enabled: boolean (default: true)
- lunch_reminder_time: varchar(5) (default: '12:00') - HH:MM
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
- last_signed_in: timestamp (default: now())
"""
