"""User profile produced by authentication clients"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class UserProfile:
    """Identity resolved from credentials by an authentication client"""

    id: str
    client_name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    roles: List[str] = field(default_factory=list)

    @property
    def email(self) -> str:
        return self.attributes.get("email", "")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert profile to a JSON-serializable dict for session storage.

        Cookie sessions are JSON encoded, so attribute values must be
        JSON-compatible.
        """
        return {
            "id": self.id,
            "client_name": self.client_name,
            "attributes": dict(self.attributes),
            "roles": list(self.roles),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=data["id"],
            client_name=data["client_name"],
            attributes=dict(data.get("attributes") or {}),
            roles=list(data.get("roles") or []),
        )
