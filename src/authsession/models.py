"""
Pydantic models for the persisted session record and session snapshots.

Persisted record layout (flat):

    {
        "authenticator": "<identifier>",
        "<property>": <value>,
        ...
    }
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

AUTHENTICATOR_KEY = "authenticator"


class SessionRecord(BaseModel):
    """The record a store holds for an authenticated session."""

    model_config = ConfigDict(extra="allow")

    authenticator: str = Field(min_length=1)

    @classmethod
    def build(cls, identifier: str, content: Mapping[str, Any]) -> "SessionRecord":
        data = dict(content)
        # The reserved key always wins over a content property of the same name
        data[AUTHENTICATOR_KEY] = identifier
        return cls.model_validate(data)

    @classmethod
    def from_data(cls, data: Optional[Mapping[str, Any]]) -> Optional["SessionRecord"]:
        """
        Parse a raw store record.

        Returns:
            The record, or None when the reserved key is missing or invalid.
        """
        if not isinstance(data, Mapping):
            return None
        try:
            return cls.model_validate(dict(data))
        except ValidationError:
            return None

    def content(self) -> dict[str, Any]:
        """Session properties, without the reserved key."""
        return dict(self.model_extra or {})

    def to_data(self) -> dict[str, Any]:
        return {AUTHENTICATOR_KEY: self.authenticator, **self.content()}


class SessionSnapshot(BaseModel):
    """Immutable view of a session's state at one point in time."""

    model_config = ConfigDict(frozen=True)

    is_authenticated: bool = False
    authenticator: Optional[str] = None
    content: Optional[dict[str, Any]] = None
