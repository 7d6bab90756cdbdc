"""Typed event configuration.

Events store their configuration as a JSON blob that has been written by
several generations of the admin frontend: keys arrive in camelCase,
booleans sometimes arrive as the strings ``"true"``/``"false"``, and unset
values are sometimes ``null``. ``EventConfig`` resolves all of that once,
at the boundary, so the rest of the code base only ever sees typed values
with defaults applied.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "MM/DD/YYYY HH:mm"


class EventConfig(BaseModel):
    """Per-event display and registration options.

    Attributes:
        is_all_day: Render dates without a time component.
        is_single_day_event: Render only the start instant.
        max_tickets_per_registration: Upper bound on tickets in one order.
        save_all_attendees_details: If True, every attendee was named at
            registration time and receives an individual ticket. If False,
            one group ticket goes to the primary attendee.
        date_format: Token pattern (``YYYY``, ``MM``, ``DD``, ``HH``,
            ``mm``...) used for event dates.
        show_end_time: Show the end time on event listings.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_all_day: bool = False
    is_single_day_event: bool = True
    max_tickets_per_registration: int = Field(default=2, ge=1)
    save_all_attendees_details: bool = False
    date_format: str = DEFAULT_DATE_FORMAT
    show_end_time: bool = False

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        """Treat null and empty-string values as unset."""
        if data is None:
            return {}
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None and v != ""}
        return data

    @classmethod
    def from_raw(cls, raw: dict | None) -> "EventConfig":
        """Parse a stored config blob, applying defaults.

        Stored values that do not validate are replaced by their defaults
        rather than failing; strict validation belongs to the write path.
        """
        raw = raw if isinstance(raw, dict) else {}
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
            logger.warning(f"Ignoring invalid event config values: {sorted(invalid)}")

        usable = {
            key: value for key, value in raw.items()
            if key not in invalid and to_camel(key) not in invalid
        }
        try:
            return cls.model_validate(usable)
        except ValidationError:
            return cls()

    def to_json(self) -> dict:
        """Serialize with the camelCase keys the frontend expects."""
        return self.model_dump(by_alias=True)
