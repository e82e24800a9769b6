"""Supabase repository for score records."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from rawscan.domain.scores import ExplanationEntry, ScoreRecord, Swap
from rawscan.services.scores import ScoreRepository


@dataclass
class SupabaseScoreRepository(ScoreRepository):
    """Supabase-backed append-only score repository."""

    client: Client

    def insert(self, record: ScoreRecord) -> UUID:
        """Insert a score row and return its id."""
        response = (
            self.client.table("scores")
            .insert(
                {
                    "user_id": record.user_id,
                    "item_id": str(record.item_id),
                    "rules_score": record.rules_score,
                    "personalized_score": record.personalized_score,
                    "explanation": [entry.to_dict() for entry in record.explanation],
                    "swaps": [swap.to_dict() for swap in record.swaps],
                    "details": record.details,
                    "created_at": record.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to insert score record")
        return UUID(str(response.data[0]["id"]))

    def latest(self, item_id: UUID, user_id: str | None) -> ScoreRecord | None:
        """Return the newest score row for an item and user."""
        query = self.client.table("scores").select("*").eq("item_id", str(item_id))
        if user_id is None:
            query = query.is_("user_id", "null")
        else:
            query = query.eq("user_id", user_id)
        response = query.order("created_at", desc=True).limit(1).execute()
        if not response.data:
            return None
        return _parse_score(response.data[0])


def _parse_score(row: dict[str, object]) -> ScoreRecord:
    """Parse a scores row into a domain record."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    return ScoreRecord(
        id=UUID(str(row["id"])),
        item_id=UUID(str(row["item_id"])),
        user_id=row.get("user_id"),
        rules_score=float(row.get("rules_score", 0.0)),
        personalized_score=float(row.get("personalized_score", 0.0)),
        explanation=[
            ExplanationEntry.from_dict(entry) for entry in row.get("explanation") or []
        ],
        swaps=[Swap.from_dict(swap) for swap in row.get("swaps") or []],
        details=dict(row.get("details") or {}),
        created_at=created_at,
    )
