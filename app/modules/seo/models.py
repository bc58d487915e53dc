# Supabase tables: page_seo_content
# This file documents the expected database schema

"""
Expected Supabase table structure:

page_seo_content:
- id: uuid (primary key)
- page_type: text (not null)
- page_id: text (not null)
- intro_text: text (nullable) - shown above the page body
- main_content: text (nullable)
- bottom_content: text (nullable) - shown below the page body
- created_by: uuid (foreign key to user_profiles.id) - set once on insert
- updated_by: uuid (foreign key to user_profiles.id)
- created_at, updated_at: timestamptz (default: now())
- unique (page_type, page_id) - one SEO block per page

Row-level security:
- select: anon and authenticated, all rows
- insert: auth.uid() = created_by and caller is an active admin/editor
- update: created_by = auth.uid() or caller is an active admin/editor
- delete: created_by = auth.uid() or caller is an active admin
"""
