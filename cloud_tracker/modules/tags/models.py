# Supabase tables: tags, application_tags
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

tags
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- name: text (not null)
- color: text (not null, default: '#3b82f6') - #rrggbb
- unique constraint on (user_id, name)

application_tags
- application_id: uuid (foreign key to applications.id, ON DELETE CASCADE)
- tag_id: uuid (foreign key to tags.id, ON DELETE CASCADE)
- primary key (application_id, tag_id)
"""
