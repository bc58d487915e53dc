# Supabase tables: user_profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

user_profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- email: text (not null) - copied from auth.users at signup
- full_name: text (nullable)
- role: text (not null, default 'viewer', check in ('admin', 'editor', 'viewer'))
- is_active: boolean (default true)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), bumped by trigger)

Trigger on_auth_user_created (after insert on auth.users, security definer):
- inserts (id, email, coalesce(full_name metadata, email local part), 'viewer')

Row-level security:
- select: anon and authenticated may read rows where is_active = true
- insert: authenticated, with check auth.uid() = id
- update: authenticated, using auth.uid() = id, with check that role and
  is_active still equal the stored values (no self-promotion)

Role and is_active changes therefore only succeed through the service_role
client, after the policy evaluator has confirmed the caller is an admin.
"""
