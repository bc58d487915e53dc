# Supabase tables: authors, categories, tags, posts, post_tags
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

authors:
- id: uuid (primary key)
- name: text (not null)
- email: text (unique, not null)
- bio: text (nullable)
- avatar_url: text (nullable)
- slug: text (unique, not null)
- created_at, updated_at: timestamptz (default: now())

categories:
- id: uuid (primary key)
- name: text (not null)
- slug: text (unique, not null)
- description: text (nullable)
- created_at: timestamptz (default: now())

tags:
- id: uuid (primary key)
- name: text (not null)
- slug: text (unique, not null)
- created_at: timestamptz (default: now())

posts:
- id: uuid (primary key)
- title: text (not null)
- slug: text (unique, not null)
- content: text (not null) - markdown, rendered by the site
- excerpt, hero_image, meta_title, meta_description: text (nullable)
- author_id: uuid (foreign key to authors.id, on delete cascade)
- category_id: uuid (foreign key to categories.id, on delete set null)
- published: boolean (default false)
- published_at: timestamptz (nullable)
- created_by: uuid (foreign key to user_profiles.id) - set once on insert
- updated_by: uuid (foreign key to user_profiles.id)
- created_at, updated_at: timestamptz (default: now())

post_tags:
- post_id: uuid (foreign key to posts.id, on delete cascade)
- tag_id: uuid (foreign key to tags.id, on delete cascade)
- primary key (post_id, tag_id)

Row-level security on posts:
- select: anon and authenticated where published = true; staff and creator see drafts
- insert: auth.uid() = created_by and caller is an active admin/editor
- update: created_by = auth.uid() or caller is an active admin/editor
- delete: created_by = auth.uid() or caller is an active admin
authors, categories, tags, post_tags: public select, writes for active admin/editor.
"""
