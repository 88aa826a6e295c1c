"""
Subscription resource schemas.

Pydantic models for the broker's subscription records. Field names follow the
broker's JSON shape; unknown fields in responses are ignored.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Subscription(BaseModel):
    """Subscription record. ``id`` stays empty until the broker assigns one."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    owning_application: str = ""
    event_types: list[str] = Field(default_factory=list)
    consumer_group: str | None = None
    read_from: str | None = None
    created_at: datetime | None = None

    def to_payload(self) -> bytes:
        """Serialize for a create request, omitting the id when unset."""
        exclude = None if self.id else {"id"}
        return self.model_dump_json(exclude=exclude, exclude_none=True).encode("utf-8")


class SubscriptionList(BaseModel):
    """Wire wrapper of a list response: ``{"items": [...]}``."""

    model_config = ConfigDict(extra="ignore")

    items: list[Subscription]
