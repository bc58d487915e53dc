# Supabase tables: content_templates
# This file documents the expected database schema

"""
Expected Supabase table structure:

content_templates:
- id: uuid (primary key)
- template_name: text (not null)
- page_type: text (not null)
- sections: jsonb (default '[]') - list of section payloads (section_type, title, content, content_data)
- description: text (nullable)
- is_public: boolean (default false) - public templates are readable by anyone
- created_by: uuid (foreign key to user_profiles.id) - set once on insert
- updated_by: uuid (foreign key to user_profiles.id)
- created_at, updated_at: timestamptz (default: now())

Row-level security:
- select: anon and authenticated where is_public = true; authenticated where created_by = auth.uid()
- insert: auth.uid() = created_by and caller is an active admin/editor
- update: created_by = auth.uid() or caller is an active admin/editor
- delete: created_by = auth.uid() or caller is an active admin
"""
