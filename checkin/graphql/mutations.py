# checkin/graphql/mutations.py
"""
GraphQL mutation resolvers for check-in management.

check_in / check_out resolve the attendee's identity upstream first, with
the client's own `user { ... }` selection, and only then let the state
machine commit the transition. An unknown tag is rejected before anything
is forwarded, and an upstream failure aborts before any local write.
"""

import logging
from datetime import datetime
from typing import Optional

import pydantic
import strawberry
from graphql.language import StringValueNode, print_ast
from strawberry.types import Info

from .. import crud
from ..core.errors import (
    AttendeeNotFoundError,
    TagExistsError,
    TagNotFoundError,
    TagValidationError,
)
from ..forwarding import ForwardSpec
from ..schemas.tag import TagCreate
from ..services.views import tag_view, user_and_tags_view
from .auth import require_actor
from .types import TagType, UserAndTags

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = ("id", "name", "email")
CHECK_IN_FORWARD = ForwardSpec(path="check_in.user", include=IDENTITY_FIELDS)
CHECK_OUT_FORWARD = ForwardSpec(path="check_out.user", include=IDENTITY_FIELDS)


async def _transition(
    info: Info, user_id: str, tag: str, checkin: bool, spec: ForwardSpec
) -> UserAndTags:
    actor = require_actor(info)
    db = info.context.db
    tag_name = tag.strip().lower()

    if crud.tag.get_by_name(db, name=tag_name) is None:
        raise TagNotFoundError(tag_name)

    # The id is written as a GraphQL string literal, never spliced raw
    head = f"user(id: {print_ast(StringValueNode(value=user_id))})"
    user_info = await info.context.registration.forward(info, spec.with_head(head))
    identity = (user_info or {}).get("user")
    if not identity:
        raise AttendeeNotFoundError(user_id)

    await info.context.check_in.transition(
        db, user_id, tag_name, checkin, actor, identity=identity
    )
    attendee = crud.attendee.get(db, user_id)
    return user_and_tags_view(identity, attendee)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def check_in(
        self, info: Info, user: strawberry.ID, tag: str
    ) -> Optional[UserAndTags]:
        """
        Check-in a user by specifying the tag name
        """
        return await _transition(info, str(user), tag, True, CHECK_IN_FORWARD)

    @strawberry.mutation
    async def check_out(
        self, info: Info, user: strawberry.ID, tag: str
    ) -> Optional[UserAndTags]:
        """
        Check-out a user by specifying the tag name
        """
        return await _transition(info, str(user), tag, False, CHECK_OUT_FORWARD)

    @strawberry.mutation
    def add_tag(
        self,
        info: Info,
        tag: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        warnOnDuplicates: bool = False,
    ) -> TagType:
        """
        Create a tag attendees can be checked in under
        """
        require_actor(info)
        db = info.context.db
        try:
            tag_in = TagCreate(
                name=tag, start=start, end=end, warn_on_duplicates=warnOnDuplicates
            )
        except pydantic.ValidationError as e:
            raise TagValidationError(
                "; ".join(error["msg"] for error in e.errors()), details={"tag": tag}
            ) from e

        if crud.tag.get_by_name(db, name=tag_in.name) is not None:
            raise TagExistsError(tag_in.name)

        created = crud.tag.create(db, obj_in=tag_in)
        logger.info(f"Tag {created.name} added")
        return tag_view(created)
