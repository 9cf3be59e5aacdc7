"""Service for tracking the participants of the active session."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from uuid import uuid4

from quiz_shuffle.core.models import JoinedParticipant

logger = logging.getLogger(__name__)


class ParticipantRegistry:
    """Hands out opaque participant identifiers for one session."""

    def __init__(self) -> None:
        self._participants: dict[str, JoinedParticipant] = {}

    def join(self, name: str) -> JoinedParticipant:
        """Register a participant and return its new identifier."""
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Participant name must not be empty.")
        entry = JoinedParticipant(
            participant_id=uuid4().hex,
            name=cleaned,
            joined_at=datetime.now(timezone.utc),
        )
        self._participants[entry.participant_id] = entry
        logger.info("New participant: %s (ID: %s)", entry.name, entry.participant_id)
        return entry

    def get(self, participant_id: str) -> JoinedParticipant | None:
        return self._participants.get(participant_id)

    def list_participants(self) -> list[JoinedParticipant]:
        """Return participants sorted by join time."""
        return sorted(self._participants.values(), key=lambda p: p.joined_at)
