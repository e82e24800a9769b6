"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from rawscan.errors import PersistenceError

if TYPE_CHECKING:
    from rawscan.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/rules", dependencies=[Depends(require_admin)])
async def list_rules(request: Request) -> dict[str, object]:
    """Return the active rules catalog and its version."""
    container: AppContainer = request.app.state.container
    engine = container.rules_engine
    return {
        "catalogVersion": engine.catalog_version,
        "rules": [rule.to_dict() for rule in engine.rules],
    }


@router.get("/goals", dependencies=[Depends(require_admin)])
async def list_goals(request: Request) -> dict[str, object]:
    """Return the goal multiplier table."""
    container: AppContainer = request.app.state.container
    table = container.personalization.table
    return {"goals": {goal: dict(table[goal]) for goal in sorted(table)}}


@router.get("/scores/{item_id}", dependencies=[Depends(require_admin)])
async def latest_score(
    item_id: UUID, request: Request, user_id: str | None = None
) -> dict[str, object]:
    """Return the newest score record for an item and optional user."""
    container: AppContainer = request.app.state.container
    try:
        record = container.score_store.load(item_id, user_id)
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {
        "id": str(record.id) if record.id else None,
        "itemId": str(record.item_id),
        "userId": record.user_id,
        "rulesScore": record.rules_score,
        "personalizedScore": record.personalized_score,
        "explanation": [entry.to_dict() for entry in record.explanation],
        "swaps": [swap.to_dict() for swap in record.swaps],
        "details": record.details,
        "createdAt": record.created_at.isoformat(),
    }
