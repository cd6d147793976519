# Supabase tables: groups, group_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: bigint identity (primary key)
- name: varchar(100) (not null)
- description: text (nullable)
- invite_code: varchar(8) (unique, not null) - from ABCDEFGHJKLMNPQRSTUVWXYZ23456789
- owner_id: bigint (foreign key to users.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

group_members:
- id: bigint identity (primary key)
- group_id: bigint (foreign key to groups.id, not null)
- user_id: bigint (foreign key to users.id, not null)
- role: text (not null, default: 'member') - values: owner, member
- joined_at: timestamp (default: now())

(group_id, user_id) is kept unique by the service, not by a constraint.
"""
