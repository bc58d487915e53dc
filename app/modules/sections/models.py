# Supabase tables: page_content_sections
# This file documents the expected database schema

"""
Expected Supabase table structure:

page_content_sections:
- id: uuid (primary key)
- page_type: text (not null, check in PageType values)
- page_id: text (not null) - blog slug or page key
- section_type: text (not null, check in SectionType values)
- title: text (nullable)
- content: text (nullable)
- content_data: jsonb (default '{}') - structured payload, shape depends on section_type
- sort_order: integer (default 0)
- is_active: boolean (default true) - only active sections are public
- created_by: uuid (foreign key to user_profiles.id) - set once on insert
- updated_by: uuid (foreign key to user_profiles.id)
- created_at, updated_at: timestamptz (default: now())
- index on (page_type, page_id) and (page_id, sort_order)

content_data shapes:
- faq_accordion: {"faqs": [{"question", "answer"}]}
- comparison_table: {"headers": [...], "rows": [{"label", "values": [...]}]}
- callout_box: {"variant": "info|warning|success|danger"}
- checklist: {"items": [...]}
- numbered_steps: {"steps": [{"title", "content"}]}
- feature_highlights: {"features": [{"title", "description", "icon"?}]}
- two_column_text: {"left_column", "right_column"}
- cta_banner: {"primary_button_text", "primary_button_url", "secondary_button_text"?, "secondary_button_url"?}

Row-level security:
- select: anon and authenticated where is_active = true
- insert: auth.uid() = created_by and caller is an active admin/editor
- update: created_by = auth.uid() or caller is an active admin/editor
- delete: created_by = auth.uid() or caller is an active admin
"""
