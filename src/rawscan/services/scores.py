"""Score store for audit and reuse of computed scores."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from rawscan.domain.scores import ScoreRecord
from rawscan.errors import PersistenceError, ScoreComputationError
from rawscan.services.rules import MAX_SCORE, MIN_SCORE

_logger = logging.getLogger(__name__)


class ScoreRepository(Protocol):
    """Persistence interface for score records."""

    def insert(self, record: ScoreRecord) -> UUID:
        """Insert a new record and return its id."""

    def latest(self, item_id: UUID, user_id: str | None) -> ScoreRecord | None:
        """Return the newest record for an item and user, if any."""


@dataclass
class ScoreStore:
    """Append-only store of score records keyed by (item, user)."""

    repository: ScoreRepository

    def save(self, record: ScoreRecord) -> UUID:
        """Persist a record and return its id. Records are never updated."""
        for label, value in (
            ("rules_score", record.rules_score),
            ("personalized_score", record.personalized_score),
        ):
            if not MIN_SCORE <= value <= MAX_SCORE:
                raise ScoreComputationError(f"{label} out of range: {value}")
        try:
            return self.repository.insert(record)
        except Exception as exc:
            _logger.exception(
                "Score store write failed", extra={"item_id": str(record.item_id)}
            )
            raise PersistenceError(f"Score store write failed: {exc}") from exc

    def load(self, item_id: UUID, user_id: str | None = None) -> ScoreRecord | None:
        """Return the newest record for an item and user."""
        try:
            return self.repository.latest(item_id, user_id)
        except Exception as exc:
            _logger.exception("Score store read failed", extra={"item_id": str(item_id)})
            raise PersistenceError(f"Score store read failed: {exc}") from exc
