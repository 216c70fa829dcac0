"""
Deck domain entity.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4


def new_deck_id() -> str:
    """Opaque identifier assigned to a deck on creation."""
    return uuid4().hex


@dataclass
class Deck:
    """A named grouping of white-card and black-card references.

    Card ids are foreign references into the cards service; they are not
    checked at write time and are only resolved when a read asks for them
    to be populated.
    """

    name: str
    white_cards: List[str] = field(default_factory=list)
    black_cards: List[str] = field(default_factory=list)
    id: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        """Wire representation shared by responses and published events."""
        return {
            "_id": self.id,
            "name": self.name,
            "whiteCards": list(self.white_cards),
            "blackCards": list(self.black_cards),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Deck":
        return cls(
            id=record.get("_id"),
            name=record["name"],
            white_cards=list(record.get("whiteCards") or []),
            black_cards=list(record.get("blackCards") or []),
        )

    def apply_changes(self, changes: Dict[str, Any]) -> None:
        """Business rule: the id is immutable, every other field is replaceable."""
        if "name" in changes and changes["name"] is not None:
            self.name = changes["name"]
        if "whiteCards" in changes and changes["whiteCards"] is not None:
            self.white_cards = list(changes["whiteCards"])
        if "blackCards" in changes and changes["blackCards"] is not None:
            self.black_cards = list(changes["blackCards"])
