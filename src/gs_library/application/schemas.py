"""Pydantic schemas for the gs_library API."""

from pydantic import BaseModel


class LibraryEntryItem(BaseModel):
    id: str
    game_id: str
    acquired_at: str  # ISO8601 string


class LibraryResponse(BaseModel):
    items: list[LibraryEntryItem]
    next_cursor: str | None
    has_more: bool


class OwnershipResponse(BaseModel):
    game_id: str
    owned: bool
