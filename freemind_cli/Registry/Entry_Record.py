# Entry_Record.py
# Description: The registry entry record and its identity rule
#
# Imports
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional, Union
#
# 3rd-Party Imports
from pydantic import BaseModel, ConfigDict, Field
#
# Local Imports
from freemind_cli.Constants import MAX_DUE_TIMESTAMP, MAX_ENTRY_ID
#
########################################################################################################################
#
# Functions:

@dataclass(frozen=True)
class Identified:
    id: int


class Unidentified:
    """Identity of a record that has not been allocated an id yet. Never equal to anything."""

    def __eq__(self, other):
        return False

    def __hash__(self):
        return id(self)

    def __repr__(self):
        return "Unidentified()"


UNIDENTIFIED = Unidentified()

RecordIdentity = Union[Identified, Unidentified]


def format_due(due: Optional[int], local: bool = False) -> str:
    """Renders a due timestamp as RFC 2822 text, or 'None' when unset."""
    if due is None:
        return "None"
    try:
        moment = datetime.fromtimestamp(due, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return "None"
    if local:
        moment = moment.astimezone()
    return format_datetime(moment)


class Record(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, ge=1, le=MAX_ENTRY_ID)
    title: str
    description: str = ""
    due: Optional[int] = Field(default=None, ge=0, le=MAX_DUE_TIMESTAMP)
    # Local-only state, never written to the registry document
    removed: bool = Field(default=False, exclude=True)
    tags: List[str] = Field(default_factory=list, exclude=True)

    @property
    def identity(self) -> RecordIdentity:
        if self.id is None:
            return UNIDENTIFIED
        return Identified(self.id)

    def __eq__(self, other):
        if not isinstance(other, Record):
            return NotImplemented
        mine = self.identity
        return isinstance(mine, Identified) and mine == other.identity

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def get_text(self) -> str:
        """Title followed by the description, for searching and filtering."""
        return f"{self.title} {self.description}"

    def get_timestamp(self) -> Optional[int]:
        return self.due

    def matches(self, text: str) -> bool:
        needle = text.strip().lower()
        if not needle:
            return True
        if needle in self.get_text().lower():
            return True
        return any(needle in tag.lower() for tag in self.tags)

    def __str__(self) -> str:
        shown_id = str(self.id) if self.id is not None else "None"
        return (
            f"ID: {shown_id}\n"
            f"Title: {self.title}\n"
            f"Description: {self.description}\n"
            f"Due: {format_due(self.due)}\n"
        )

#
# End of Entry_Record.py
########################################################################################################################
