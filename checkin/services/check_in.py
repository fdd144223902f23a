# checkin/services/check_in.py
"""
Per-tag check-in state machine.

For one (attendee, tag) pair a transition:

1. reads the recorded details (empty on the first transition);
2. decides success: a first transition succeeds only if it is a check-in,
   later ones only if they differ from the last recorded action. Tags with
   warnOnDuplicates off accept every transition, but the duplicate is
   still logged;
3. appends an immutable TagDetail, success or not;
4. recomputes last_successful_checkin: the latest detail with the same
   checked_in flag and checkin_success set;
5. mirrors the new detail into the state's convenience fields and commits;
6. publishes the attendee's new tag map on `tag_change`. The commit stands
   even when the notification backend is unreachable.

Transitions for the same pair are serialized by an in-process lock, and the
state row's version column (or a unique key, when two processes create the
same attendee or state at once) turns a lost cross-process race into a
ConcurrentTransitionError instead of a silently discarded detail.
"""

import asyncio
import logging
import weakref
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from checkin import crud
from checkin.core.errors import (
    AttendeeNotFoundError,
    ConcurrentTransitionError,
    TagNotFoundError,
)
from checkin.models.attendee import AttendeeTag, TagDetail
from checkin.services.notifier import TAG_CHANGE, ChangeNotifier
from checkin.services.views import user_and_tags_view

logger = logging.getLogger(__name__)


def is_state_change(details: Sequence[TagDetail], checkin: bool) -> bool:
    """False when `checkin` repeats the last recorded action (or checks out first)."""
    if not details:
        return checkin
    return details[-1].checked_in != checkin


def last_successful_position(details: Sequence[TagDetail], checkin: bool) -> Optional[int]:
    for position in range(len(details) - 1, -1, -1):
        detail = details[position]
        if detail.checked_in == checkin and detail.checkin_success:
            return position
    return None


class CheckInStateMachine:
    """Validates and commits check-in/out transitions."""

    def __init__(self, notifier: ChangeNotifier):
        self.notifier = notifier
        # Entries vanish once no transition holds or waits on the lock
        self._locks: "weakref.WeakValueDictionary[Tuple[str, str], asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, attendee_id: str, tag_name: str) -> asyncio.Lock:
        key = (attendee_id, tag_name)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def transition(
        self,
        db: Session,
        attendee_id: str,
        tag_name: str,
        checkin: bool,
        actor: str,
        identity: Optional[dict] = None,
    ) -> TagDetail:
        """
        Records a check-in (checkin=True) or check-out for an attendee under
        a tag and returns the appended detail.

        `identity` is the upstream user the attendee record is created from
        when it does not exist yet; it is also the `user` half of the
        published notification.
        """
        tag_name = tag_name.strip().lower()
        tag = crud.tag.get_by_name(db, name=tag_name)
        if tag is None:
            raise TagNotFoundError(tag_name)

        async with self._lock_for(attendee_id, tag_name):
            attendee = crud.attendee.get(db, attendee_id)
            if attendee is None:
                if identity is None:
                    raise AttendeeNotFoundError(attendee_id)
                attendee = crud.attendee.build_from_identity(
                    db, id=attendee_id, identity=identity
                )
                logger.info(f"Created attendee {attendee_id}")

            state = attendee.tag_states.get(tag_name)
            if state is None:
                state = AttendeeTag(tag_name=tag_name, tag=tag, details=[])
                attendee.tag_states[tag_name] = state

            details: List[TagDetail] = list(state.details)
            changed = is_state_change(details, checkin)
            success = changed if tag.warn_on_duplicates else True

            detail = TagDetail(
                position=len(details),
                checked_in=checkin,
                checked_in_date=datetime.now(timezone.utc),
                checked_in_by=actor,
                checkin_success=success,
            )
            state.details.append(detail)
            details.append(detail)

            state.last_successful_position = last_successful_position(details, checkin)
            state.checked_in = detail.checked_in
            state.checked_in_date = detail.checked_in_date
            state.checked_in_by = detail.checked_in_by
            state.checkin_success = detail.checkin_success

            try:
                db.commit()
            except (StaleDataError, IntegrityError) as e:
                db.rollback()
                logger.warning(f"Concurrent transition on {attendee_id}/{tag_name}: {e}")
                raise ConcurrentTransitionError(attendee_id, tag_name) from e

        logger.info(
            f"{'Check-in' if checkin else 'Check-out'} of {attendee_id} for {tag_name} "
            f"by {actor}: success={success} duplicate={not changed}"
        )

        user = identity or {"id": attendee.id, "name": attendee.name}
        try:
            await self.notifier.publish(TAG_CHANGE, user_and_tags_view(user, attendee))
        except RedisError as e:
            logger.warning(f"Failed to publish {TAG_CHANGE} for {attendee_id}/{tag_name}: {e}")
        return detail
