"""Request context sent alongside /message and /speech queries."""

import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """Geographic coordinates of the user."""

    lat: float = Field(..., ge=-90.0, le=90.0)
    long: float = Field(..., ge=-180.0, le=180.0)

    model_config = {"frozen": True}


class Context(BaseModel):
    """
    Context used by Wit.ai to resolve relative entities ("tomorrow", "nearby").

    Attributes:
        reference_time: Local time of the user (ISO 8601 with offset on the wire)
        timezone: IANA timezone name, e.g. "Europe/Paris"
        locale: Locale of the user, e.g. "en_US"
        coords: Location of the user
    """

    reference_time: Optional[datetime] = None
    timezone: Optional[str] = None
    locale: Optional[str] = None
    coords: Optional[Coordinates] = None

    model_config = {"frozen": True}

    def with_reference_time(self, reference_time: datetime) -> "Context":
        return self.model_copy(update={"reference_time": reference_time})

    def with_timezone(self, timezone: str) -> "Context":
        return self.model_copy(update={"timezone": timezone})

    def with_locale(self, locale: str) -> "Context":
        return self.model_copy(update={"locale": locale})

    def with_coordinates(self, lat: float, long: float) -> "Context":
        return self.model_copy(update={"coords": Coordinates(lat=lat, long=long)})

    def reference_time_or_now(self) -> datetime:
        """Reference time if set, otherwise the current local time."""
        if self.reference_time is not None:
            return self.reference_time
        return datetime.now().astimezone()

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)

    def to_query_value(self) -> str:
        """JSON encoding for the "context" query parameter."""
        return json.dumps(self.model_dump(mode="json", exclude_none=True))
