"""
Policy evaluator for the CMS.

Pure decision functions: given who is acting, what they want to do and the
resource they want to do it to, answer allow or deny. No I/O happens here; the
callers load the profile and the resource row first.

Rules are evaluated in order and the first match wins:

1. An inactive actor is denied everything.
2. Reading a published/active resource is allowed for anyone, anonymous included.
3. Create needs the "create" capability (editor, admin).
4. Update needs the "update" capability (editor, admin) or ownership.
5. Delete needs the "delete" capability (admin) or ownership.
6. A profile owner may change the non-privileged fields of their own profile.
7. role / is_active on a profile may only be changed with "manage_profiles" (admin).
8. Everything else is denied.

The same intent is enforced again by the row-level policies on the Supabase
tables (see the models.py of each content module). Both layers are kept.
"""

from enum import Enum
from typing import Iterable, Optional

from app.config.permissions_config import ADMIN_ROUTE_ROLES, DEFAULT_ROLE, ROLE_CAPABILITIES
from app.core.context import ANONYMOUS, Actor, Profile, ResourceRef, Role


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


PRIVILEGED_PROFILE_FIELDS = frozenset({"role", "is_active"})


def role_grants(role: Optional[Role], capability: str) -> bool:
    if role is None:
        return False
    return capability in ROLE_CAPABILITIES[role]


def actor_from_profile(profile: Optional[Profile]) -> Actor:
    """A missing profile is anonymous, never a defaulted viewer."""
    if profile is None:
        return ANONYMOUS
    return Actor(id=profile.id, role=profile.role, is_active=profile.is_active)


def is_owner(actor: Actor, resource: Optional[ResourceRef]) -> bool:
    if actor.is_anonymous or resource is None or resource.created_by is None:
        return False
    return actor.id == resource.created_by


def is_allowed(actor: Actor, action: Action, resource: Optional[ResourceRef] = None) -> bool:
    if not actor.is_active:
        return False

    if action == Action.READ and resource is not None and resource.is_published:
        return True

    if actor.is_anonymous:
        return False

    if action == Action.CREATE:
        return role_grants(actor.role, "create")

    if action == Action.UPDATE:
        return role_grants(actor.role, "update") or is_owner(actor, resource)

    if action == Action.DELETE:
        return role_grants(actor.role, "delete") or is_owner(actor, resource)

    if action == Action.READ:
        return role_grants(actor.role, "read_unpublished") or is_owner(actor, resource)

    return False


def can_update_profile(actor: Actor, target_profile_id: str, changed_fields: Iterable[str]) -> bool:
    """
    Decide a profile update. Privileged fields (role, is_active) need an admin;
    the remaining fields may only be changed by the profile owner. A request that
    mixes both must satisfy both.
    """
    if not actor.is_active or actor.is_anonymous:
        return False

    fields = set(changed_fields)
    privileged = fields & PRIVILEGED_PROFILE_FIELDS
    plain = fields - PRIVILEGED_PROFILE_FIELDS
    is_self = actor.id == target_profile_id

    if privileged and not role_grants(actor.role, "manage_profiles"):
        return False
    if plain and not is_self:
        return False
    if not fields:
        return is_self or role_grants(actor.role, "manage_profiles")
    return True


def can_access_admin_routes(profile: Optional[Profile]) -> bool:
    """Coarse gate for /cms-admin and /admin."""
    if profile is None or not profile.is_active:
        return False
    return profile.role in ADMIN_ROUTE_ROLES


def initial_profile(identity_id: str, email: str, full_name: Optional[str] = None) -> dict:
    """
    Row written when an identity is first created. Mirrors the signup trigger:
    role is always the default role and the profile starts active, whatever the
    caller supplied.
    """
    return {
        "id": identity_id,
        "email": email,
        "full_name": full_name or email.split("@", 1)[0],
        "role": DEFAULT_ROLE.value,
        "is_active": True,
    }
