"""
Roles and Capabilities Configuration
This config defines the capability matrix for the three CMS roles and the
content resources they act on.
Used by the policy evaluator, the /auth/me endpoint and the maintenance script.
"""

from app.core.context import Role

# Content resources and the actions the CMS exposes on them
RESOURCES = {
    "posts": {
        "table": "posts",
        "published_column": "published",
        "description": "Blog posts"
    },
    "sections": {
        "table": "page_content_sections",
        "published_column": "is_active",
        "description": "Page content sections (FAQ blocks, checklists, tables...)"
    },
    "seo": {
        "table": "page_seo_content",
        "published_column": None,  # SEO blocks are always public
        "description": "Per-page SEO copy"
    },
    "templates": {
        "table": "content_templates",
        "published_column": "is_public",
        "description": "Reusable section templates"
    },
}

# Capabilities granted by role alone, independent of ownership.
# "read_unpublished" covers drafts, inactive sections and private templates.
# "manage_profiles" covers role and is_active changes on any profile.
ROLE_CAPABILITIES = {
    Role.ADMIN: frozenset({"create", "update", "delete", "read_unpublished", "manage_profiles"}),
    Role.EDITOR: frozenset({"create", "update", "read_unpublished"}),
    Role.VIEWER: frozenset(),
}

# Roles allowed through the session gate on admin UI routes
ADMIN_ROUTE_ROLES = frozenset({Role.ADMIN, Role.EDITOR})

# Role assigned by the signup trigger
DEFAULT_ROLE = Role.VIEWER

_missing = set(Role) - set(ROLE_CAPABILITIES)
if _missing:
    raise RuntimeError(f"ROLE_CAPABILITIES has no entry for: {sorted(r.value for r in _missing)}")


def get_capability_matrix():
    """
    Returns the capability list for every role
    Format: {
        "roles": [
            {"name": "editor", "capabilities": ["posts:create", "posts:read_unpublished", ...]},
            ...
        ]
    }
    """
    roles = []
    for role in Role:
        capabilities = []
        for resource in RESOURCES:
            for capability in sorted(ROLE_CAPABILITIES[role]):
                if capability == "manage_profiles":
                    continue
                capabilities.append(f"{resource}:{capability}")
        if "manage_profiles" in ROLE_CAPABILITIES[role]:
            capabilities.append("profiles:manage")
        roles.append({"name": role.value, "capabilities": capabilities})
    return {"roles": roles}


def get_role_capabilities(role: Role) -> list:
    """Flat capability names for one role, as reported by /auth/me."""
    for entry in get_capability_matrix()["roles"]:
        if entry["name"] == role.value:
            return entry["capabilities"]
    return []
