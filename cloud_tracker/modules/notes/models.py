# Supabase table: app_notes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- application_id: uuid (foreign key to applications.id, ON DELETE CASCADE)
- user_id: uuid (foreign key to auth.users.id, not null)
- content: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
