"""
Helpers shared by the content services: load the ownership columns of a row,
check the policy evaluator before touching storage, and stamp created_by /
updated_by on outgoing payloads.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, status
from supabase import Client

from app.core.context import Actor, ResourceRef
from app.core.policy import Action, is_allowed

# Columns an update payload may never carry
IMMUTABLE_COLUMNS = ("id", "created_by", "created_at")


def resource_ref_from_row(row: Dict[str, Any], published_column: Optional[str]) -> ResourceRef:
    if published_column is None:
        is_published = True
    else:
        is_published = bool(row.get(published_column))
    return ResourceRef(created_by=row.get("created_by"), is_published=is_published)


def fetch_resource(
    supabase: Client,
    table: str,
    resource_id: str,
    published_column: Optional[str],
    not_found_detail: str = "Resource not found",
) -> Tuple[Dict[str, Any], ResourceRef]:
    result = supabase.table(table).select("*").eq("id", resource_id).maybe_single().execute()
    if result is None or not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_detail)
    row = result.data
    return row, resource_ref_from_row(row, published_column)


def ensure_allowed(actor: Actor, action: Action, resource: Optional[ResourceRef] = None, what: str = "resource") -> None:
    if not is_allowed(actor, action, resource):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not allowed to {action.value} this {what}"
        )


def stamp_created(payload: Dict[str, Any], actor: Actor) -> Dict[str, Any]:
    data = {k: v for k, v in payload.items() if k not in IMMUTABLE_COLUMNS}
    data["created_by"] = actor.id
    data["updated_by"] = actor.id
    return data


def stamp_updated(payload: Dict[str, Any], actor: Actor) -> Dict[str, Any]:
    data = {k: v for k, v in payload.items() if k not in IMMUTABLE_COLUMNS}
    data["updated_by"] = actor.id
    data["updated_at"] = datetime.now(timezone.utc).isoformat()
    return data
