# checkin/services/views.py
"""
JSON-ready views of local check-in state.

The same shapes are returned by mutations, resolved for `UserAndTags.tags`
and published on `tag_change`, so they hold only plain values (dates as
ISO strings) and survive a trip through Redis unchanged.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from checkin.models.attendee import Attendee, AttendeeTag, TagDetail
from checkin.models.tag import Tag


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def tag_view(tag: Tag) -> Dict[str, Any]:
    return {
        "name": tag.name,
        "start": _iso(tag.start),
        "end": _iso(tag.end),
        "warnOnDuplicates": tag.warn_on_duplicates,
    }


def detail_view(detail: Optional[TagDetail]) -> Optional[Dict[str, Any]]:
    if detail is None:
        return None
    return {
        "checked_in": detail.checked_in,
        "checked_in_date": _iso(detail.checked_in_date),
        "checked_in_by": detail.checked_in_by,
        "checkin_success": detail.checkin_success,
    }


def tag_state_view(state: AttendeeTag) -> Dict[str, Any]:
    return {
        "tag": tag_view(state.tag),
        "checked_in": state.checked_in,
        "checked_in_date": _iso(state.checked_in_date),
        "checked_in_by": state.checked_in_by,
        "checkin_success": state.checkin_success,
        "last_successful_checkin": detail_view(state.last_successful_checkin),
        "details": [detail_view(detail) for detail in state.details],
    }


def tag_states_view(attendee: Optional[Attendee]) -> List[Dict[str, Any]]:
    if attendee is None:
        return []
    return [tag_state_view(attendee.tag_states[name]) for name in sorted(attendee.tag_states)]


def user_and_tags_view(user: Dict[str, Any], attendee: Optional[Attendee]) -> Dict[str, Any]:
    """The upstream identity next to the attendee's local tag map."""
    return {"user": user, "tags": tag_states_view(attendee)}
