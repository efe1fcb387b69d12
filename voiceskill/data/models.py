"""
Data models for persistence.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class UserMetadata:
    """Bookkeeping the runtime keeps for every user."""

    created_at: datetime = field(default_factory=datetime.now)
    last_used_at: datetime = field(default_factory=datetime.now)
    sessions_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert the model to a dictionary."""
        return {
            "created_at": self.created_at.isoformat(),
            "last_used_at": self.last_used_at.isoformat(),
            "sessions_count": self.sessions_count
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserMetadata':
        """Create a model from a dictionary."""
        created_at = data.get("created_at")
        last_used_at = data.get("last_used_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if isinstance(last_used_at, str):
            last_used_at = datetime.fromisoformat(last_used_at)

        return cls(
            created_at=created_at or datetime.now(),
            last_used_at=last_used_at or datetime.now(),
            sessions_count=int(data.get("sessions_count", 0))
        )


@dataclass
class User:
    """Model representing a user of the skill, keyed by the platform user id."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    metadata: UserMetadata = field(default_factory=UserMetadata)

    def touch(self, new_session: bool, now: Optional[datetime] = None) -> None:
        """Record that the user just sent a request."""
        self.metadata.last_used_at = now or datetime.now()
        if new_session:
            self.metadata.sessions_count += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert the model to a dictionary."""
        return {
            "id": self.id,
            "data": self.data,
            "metadata": self.metadata.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        """Create a model from a dictionary."""
        return cls(
            id=data["id"],
            data=dict(data.get("data", {})),
            metadata=UserMetadata.from_dict(data.get("metadata", {}))
        )
