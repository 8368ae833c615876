# Supabase tables: maintenance_command_types, maintenance_runs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

maintenance_command_types (global reference data, seeded by
cloud_tracker/scripts/seed_reference_data.py)
- id: uuid (primary key)
- name: text (not null)
- slug: text (unique, not null)
- description: text (nullable)
- recommended_frequency_days: integer (not null)
- sort_order: integer (default: 0)
- is_active: boolean (default: true)

maintenance_runs
- id: uuid (primary key)
- application_id: uuid (foreign key to applications.id, ON DELETE CASCADE)
- command_type_id: uuid (foreign key to maintenance_command_types.id)
- status: text (not null, default: 'completed') - values: pending, running, completed, failed, skipped
- results: jsonb (nullable)
- notes: text (nullable)
- run_at: timestamp (default: now())
- created_at: timestamp (default: now())
"""
