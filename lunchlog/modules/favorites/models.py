# Supabase tables: favorite_meals

"""
Expected Supabase table structure:

favorite_meals:
- id: bigint identity (primary key)
- user_id: bigint (foreign key to users.id, not null)
- dish_name: varchar(255) (not null)
- category: text (not null) - values: japanese, western, chinese, other
- note: text (nullable)
- image_url: text (nullable)
- usage_count: integer (default: 0)
- last_used_at: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
