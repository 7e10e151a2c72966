"""Domain models for gs_library — ownership records."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class LibraryEntry:
    """Permanent entitlement: at most one per (user_id, game_id)."""

    id: str
    user_id: str
    game_id: str
    acquired_at: datetime

