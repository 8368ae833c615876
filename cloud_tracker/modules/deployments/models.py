# Supabase table: deployments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- application_id: uuid (foreign key to applications.id, ON DELETE CASCADE)
- provider_id: uuid (foreign key to cloud_providers.id, not null)
- environment_id: uuid (foreign key to environments.id, not null)
- external_id: text (nullable) - set by provider sync, "<provider>:<native id>"
- url: text (nullable)
- branch: text (nullable)
- commit_sha: text (nullable)
- status: text (not null, default: 'deployed') - values: pending, building, deployed, failed, rolled_back
- deployed_at: timestamp (not null, default: now())
- created_at: timestamp (default: now())
- unique constraint on (application_id, external_id)
"""
