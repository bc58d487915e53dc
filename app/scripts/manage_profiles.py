"""
Profile Maintenance Script
Privileged operations on user_profiles that bypass row-level security:
- promote: set the role of a user (the first admin has to be created this way)
- activate / deactivate: flip is_active
- backfill: create missing profiles for auth users with the signup defaults

Usage:
    python -m app.scripts.manage_profiles promote <user_id> <admin|editor|viewer>
    python -m app.scripts.manage_profiles deactivate <user_id>
    python -m app.scripts.manage_profiles backfill
"""

import argparse
import logging
import sys
from datetime import datetime, timezone

from app.core.context import Role
from app.core.policy import initial_profile
from app.database.supabase_client import get_service_supabase
from supabase import Client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def set_profile_access(supabase: Client, user_id: str, **changes) -> bool:
    """Write role / is_active for one profile"""
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    result = supabase.table("user_profiles")\
        .update(changes)\
        .eq("id", user_id)\
        .execute()
    if not result.data:
        logger.error(f"No profile found for user {user_id}")
        return False
    logger.info(f"Profile {user_id} updated: {changes}")
    return True


def backfill_profiles(supabase: Client) -> int:
    """Create profiles for auth users the signup trigger missed"""
    logger.info("Backfilling profiles...")
    existing = supabase.table("user_profiles").select("id").execute()
    known_ids = {row["id"] for row in (existing.data or [])}

    created_count = 0
    for user in supabase.auth.admin.list_users():
        if user.id in known_ids:
            continue
        try:
            full_name = (user.user_metadata or {}).get("full_name")
            supabase.table("user_profiles").insert(
                initial_profile(user.id, user.email or "", full_name)
            ).execute()
            created_count += 1
            logger.debug(f"Created profile: {user.id}")
        except Exception as e:
            logger.error(f"Error creating profile for {user.id}: {e}")

    logger.info(f"Profiles backfilled: {created_count} created")
    return created_count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Privileged user_profiles maintenance")
    commands = parser.add_subparsers(dest="command", required=True)

    promote = commands.add_parser("promote", help="Set the role of a user")
    promote.add_argument("user_id")
    promote.add_argument("role", choices=[r.value for r in Role])

    for name in ("activate", "deactivate"):
        toggle = commands.add_parser(name, help=f"{name.capitalize()} a user")
        toggle.add_argument("user_id")

    commands.add_parser("backfill", help="Create missing profiles with signup defaults")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    supabase = get_service_supabase()
    if supabase is None:
        logger.error("SUPABASE_SERVICE_ROLE_KEY is not configured")
        return 1

    if args.command == "promote":
        ok = set_profile_access(supabase, args.user_id, role=args.role)
    elif args.command in ("activate", "deactivate"):
        ok = set_profile_access(supabase, args.user_id, is_active=args.command == "activate")
    else:
        backfill_profiles(supabase)
        ok = True
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
