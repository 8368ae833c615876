# Supabase table: environments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure (global reference data, seeded by
cloud_tracker/scripts/seed_reference_data.py):
- id: uuid (primary key)
- name: text (not null) - Development, Staging, Production
- slug: text (unique, not null) - development, staging, production
- sort_order: integer (not null)
"""
