# Sync writes to the deployments table (see modules/deployments/models.py)
# and reads applications, cloud_providers, environments and user_settings.

"""
Columns written by sync on the deployments table:
- external_id: text, "<provider>:<native id>" (vercel:<uid>, cloudflare:<id>, github:<id>)
- unique constraint on (application_id, external_id)
- insert sets application_id, provider_id, environment_id, external_id, url,
  branch, commit_sha, status, deployed_at
- update (status changed only) sets status, url, branch, commit_sha
- rows are never deleted by sync
"""
