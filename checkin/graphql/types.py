# checkin/graphql/types.py
"""
GraphQL types for the check-in API.

User mirrors the registration service's identity type. Its values come
from forwarded, reshaped dicts, and the schema's default resolver reads
mapping keys, so most fields need no resolver of their own.
"""

import typing
from typing import List, Optional

import strawberry
from strawberry.types import Info


def resolve_key_or_attribute(root: typing.Any, name: str) -> typing.Any:
    """Default field resolver for forwarded dicts and ORM/view objects alike."""
    if isinstance(root, dict):
        return root.get(name)
    return getattr(root, name)


@strawberry.type
class FormItem:
    name: str
    type: Optional[str]
    value: Optional[str]
    values: Optional[List[str]]


@strawberry.type
class Branch:
    type: Optional[str]
    data: Optional[List[FormItem]]


@strawberry.type
class User:
    id: strawberry.ID
    name: Optional[str]
    email: Optional[str]
    email_verified: Optional[bool]
    admin: Optional[bool]
    applied: Optional[bool]
    accepted: Optional[bool]
    accepted_and_attending: Optional[bool]
    confirmed: Optional[bool]
    confirmation_branch: Optional[str]
    application: Optional[Branch]
    confirmation: Optional[Branch]

    @strawberry.field
    def questions(self, root, names: List[str]) -> Optional[List[FormItem]]:
        # Answered upstream with the client's own arguments
        return resolve_key_or_attribute(root, "questions")


@strawberry.input
class UserFilter:
    applied: Optional[bool] = None
    accepted: Optional[bool] = None
    confirmed: Optional[bool] = None
    application_branch: Optional[str] = None
    confirmation_branch: Optional[str] = None


@strawberry.type
class TagType:
    name: str
    start: Optional[str]
    end: Optional[str]
    warnOnDuplicates: bool


@strawberry.type
class TagDetailType:
    checked_in: bool
    checked_in_date: str
    checked_in_by: str
    checkin_success: bool


@strawberry.type
class TagStateType:
    tag: TagType
    checked_in: bool
    checked_in_date: Optional[str]
    checked_in_by: Optional[str]
    checkin_success: bool
    last_successful_checkin: Optional[TagDetailType]
    details: List[TagDetailType]


@strawberry.type
class UserAndTags:
    user: User

    @strawberry.field
    async def tags(self, root, info: Info) -> List[TagStateType]:
        """Tags associated with a user"""
        tags = resolve_key_or_attribute(root, "tags")
        if tags is not None:
            return tags
        user = resolve_key_or_attribute(root, "user") or {}
        user_id = user.get("id")
        if not user_id:
            return []
        return await info.context.loaders["attendee_tags_loader"].load(user_id)
