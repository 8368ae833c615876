# Supabase Auth
# Authentication is delegated to Supabase's built-in auth system.
# No custom tables are required; Supabase Auth handles:
# - User login and session management (email/password, OAuth)
# - JWT token generation and validation
# - Password reset emails

"""
Supabase Auth provides:
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.reset_password_for_email() - Send a password reset link
- auth.sign_out() - Logout users

Every other table carries a user_id referencing auth.users.id.
"""
