# Supabase Auth
# This module uses Supabase's built-in authentication system as the credential store
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - Password sign-in and access/refresh token issuance
# - JWT token validation and refresh
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Resolve an access token to a user
- auth.refresh_session() - Exchange a refresh token for a new session
- auth.admin.sign_out(jwt) - Revoke the session behind one access token

On every auth.users insert the database trigger on_auth_user_created writes
the matching user_profiles row with role 'viewer' and is_active true
(see app/modules/profiles/models.py). The profile is never created lazily by
this service.

The session is kept in the browser as two httpOnly cookies,
sb-access-token and sb-refresh-token, valid for 7 days.

Sign-up, sign-in, refresh and sign-out run on a fresh client per request
(get_auth_supabase) that never persists the session it receives; the shared
anon client only ever carries the anon key.
"""
