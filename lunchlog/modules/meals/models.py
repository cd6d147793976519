# Supabase tables: meal_records
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

meal_records:
- id: bigint identity (primary key)
- user_id: bigint (foreign key to users.id, not null)
- group_id: bigint (nullable) - optional group tag
- date: varchar(10) (not null) - YYYY-MM-DD, a calendar date, not a timestamp
- meal_type: text (not null) - values: lunch, dinner
- dish_name: varchar(255) (not null)
- category: text (not null) - values: japanese, western, chinese, other
- note: text (nullable)
- image_url: text (nullable)
- is_favorite: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

There is deliberately no unique index on (user_id, date, meal_type);
guest-data migration checks for an existing row before inserting.
"""
