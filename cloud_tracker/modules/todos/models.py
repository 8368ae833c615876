# Supabase table: app_todos
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- application_id: uuid (foreign key to applications.id, ON DELETE CASCADE)
- user_id: uuid (foreign key to auth.users.id, not null)
- text: text (not null)
- completed: boolean (default: false)
- sort_order: integer (default: 0) - new todos go to the end
- created_at: timestamp (default: now())
"""
