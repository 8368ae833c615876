# Supabase table: cloud_providers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- name: text (not null)
- slug: text (not null) - ^[a-z0-9-]+$; sync looks up "vercel", "cloudflare", "github"
- icon_name: text (nullable)
- base_url: text (nullable)
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
- unique constraint on (user_id, slug)
- deployments.provider_id references this table without ON DELETE CASCADE,
  so deleting a provider that still has deployments fails with 23503
"""
