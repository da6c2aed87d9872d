"""
Note Model.

The persisted unit of data: one sticky note with its text and its on-screen
geometry. Field names are snake_case in Python and camelCase on disk
(createdAt, updatedAt, isVisible).

Type checking is strict (a string where an int belongs is a corrupt record),
but the domain rules live in is_valid() rather than in validators, so that
an invalid note can be constructed and then rejected by the store.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stickynotes.core.utils import new_note_id, utc_timestamp

MIN_NOTE_WIDTH = 100
MIN_NOTE_HEIGHT = 100

DEFAULT_X = 100
DEFAULT_Y = 100
DEFAULT_WIDTH = 200
DEFAULT_HEIGHT = 150

DUPLICATE_OFFSET = 30


class Note(BaseModel):
    """
    A sticky note.

    Missing fields in a stored record take the defaults below; unknown
    fields are ignored. A note without id or timestamps is constructible
    but fails is_valid().
    """

    id: str = Field(default="", description="Opaque unique identifier, immutable once created")
    content: str = Field(default="", description="Note text, may be empty")
    x: int = Field(default=DEFAULT_X, description="Top-left screen position")
    y: int = Field(default=DEFAULT_Y, description="Top-left screen position")
    width: int = Field(default=DEFAULT_WIDTH)
    height: int = Field(default=DEFAULT_HEIGHT)
    created_at: str = Field(default="", description="ISO 8601 creation timestamp")
    updated_at: str = Field(default="", description="ISO 8601 modification timestamp")
    is_visible: bool = Field(default=True, description="Display state, independent of existence")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )

    @classmethod
    def create(cls, note_id: str | None = None) -> "Note":
        """
        Create a new empty note with default geometry and fresh timestamps.

        Args:
            note_id: Identifier to use; a UUID4 string is generated if omitted

        Returns:
            A new visible Note at the default position
        """
        now = utc_timestamp()
        return cls(
            id=note_id or new_note_id(),
            created_at=now,
            updated_at=now,
        )

    def touch(self) -> None:
        """Update the modification timestamp."""
        self.updated_at = utc_timestamp()

    def is_valid(self) -> bool:
        """Check the note can be persisted."""
        if not self.id.strip():
            return False
        if not self.created_at.strip() or not self.updated_at.strip():
            return False
        if self.width < MIN_NOTE_WIDTH or self.height < MIN_NOTE_HEIGHT:
            return False
        if self.x < 0 or self.y < 0:
            return False
        return True

    def duplicate(self, new_id: str | None = None) -> "Note":
        """
        Copy this note under a new id, offset so it does not sit on top.

        Args:
            new_id: Identifier for the copy; generated if omitted

        Returns:
            A new Note with the same content, size and visibility
        """
        now = utc_timestamp()
        return self.model_copy(
            update={
                "id": new_id or new_note_id(),
                "x": self.x + DUPLICATE_OFFSET,
                "y": self.y + DUPLICATE_OFFSET,
                "created_at": now,
                "updated_at": now,
            },
        )

    def to_record(self) -> dict:
        """Serialize to the on-disk record shape (camelCase keys)."""
        return self.model_dump(by_alias=True)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, x={self.x}, y={self.y}, size={self.width}x{self.height})>"
