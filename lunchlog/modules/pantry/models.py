# Supabase tables: pantry_inventory

"""
Expected Supabase table structure:

pantry_inventory:
- id: bigint identity (primary key)
- user_id: bigint (foreign key to users.id, not null)
- group_id: bigint (foreign key to groups.id, nullable)
- ingredient_name: varchar(255) (not null)
- quantity: varchar(50) (nullable, free text such as "2" or "半分")
- unit: varchar(20) (nullable)
- category: text (not null) - values: vegetable, meat, fish, seasoning, other
- expiry_date: varchar(10) (nullable, YYYY-MM-DD)
- low_stock_alert: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
