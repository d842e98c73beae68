from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Subscriber:
    id: str
    url: str
    secret: str = field(repr=False)
    events: frozenset[str] = frozenset()
    is_active: bool = True
    owner_id: str = ""

    def is_eligible(self, event_type: str) -> bool:
        """A subscriber only receives events it is active and subscribed for."""
        return self.is_active and event_type in self.events

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Subscriber":
        """Build a Subscriber from a loosely-typed persistence row."""
        owner_id = row.get("owner_id", row.get("user_id", ""))
        return cls(
            id=str(row["id"]),
            url=row["url"],
            secret=row.get("secret") or "",
            events=frozenset(row.get("events") or ()),
            is_active=bool(row.get("is_active", True)),
            owner_id=str(owner_id),
        )
