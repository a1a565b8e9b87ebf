from ancestry_atlas.events.deriver import (
    count_placeholder_events,
    derive_events,
    derive_person_events,
)
from ancestry_atlas.models import format_display_name

__all__ = [
    "count_placeholder_events",
    "derive_events",
    "derive_person_events",
    "format_display_name",
]
