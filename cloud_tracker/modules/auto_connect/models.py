# Auto-connect only updates existing rows of the applications table
# (see modules/applications/models.py).

"""
Columns auto-connect may fill in, each only while still empty:
- vercel_project_id
- cloudflare_project_name
- cloudflare_worker_name
- github_repo_name ("owner/repo", only for github.com repository URLs)
- live_url
"""
