# Supabase table: applications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- name: text (not null)
- description: text (nullable)
- repository_url: text (nullable)
- live_url: text (nullable)
- tech_stack: text[] (default: {})
- status: text (not null, default: 'active') - values: active, inactive, archived, maintenance
- vercel_project_id: text (nullable)
- cloudflare_project_name: text (nullable)
- cloudflare_worker_name: text (nullable)
- github_repo_name: text (nullable) - "owner/repo"
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), maintained by trigger)

Deleting an application cascades to application_tags, deployments,
app_todos, app_notes, maintenance_runs and claude_sessions.
"""
