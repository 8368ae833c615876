# Supabase table: claude_sessions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- application_id: uuid (foreign key to applications.id, ON DELETE CASCADE)
- started_at: timestamp (not null, default: now())
- ended_at: timestamp (nullable)
- duration_minutes: integer (nullable) - derived from ended_at - started_at
- starting_branch: text (nullable)
- ending_branch: text (nullable)
- commits_count: integer (default: 0)
- context_id: text (nullable)
- session_source: text (default: 'claude-code') - values: claude-code, claude-ai, mixed
- tokens_input: integer (nullable)
- tokens_output: integer (nullable)
- tokens_total: integer (nullable) - tokens_input + tokens_output when both are known
- summary: text (nullable)
- accomplishments: text[] (default: {})
- next_steps: text[] (default: {})
- files_changed: text[] (default: {})
- maintenance_runs: uuid[] (default: {}) - maintenance_runs.id values recorded during the session
- security_findings: jsonb (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Rows are written either by dashboard users (JWT, ownership checked through
the application) or by the external coding-session hook (static API token,
service-role client).
"""
