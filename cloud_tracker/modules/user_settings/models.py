# Supabase table: user_settings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, unique)
- vercel_token: text (nullable)
- vercel_team_id: text (nullable)
- cloudflare_token: text (nullable)
- cloudflare_account_id: text (nullable) - 32 lowercase hex characters
- github_token: text (nullable)
- github_username: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Tokens are never returned by the API; responses carry has_* flags instead.
"""
