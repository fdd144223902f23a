# checkin/graphql/queries.py
import strawberry
from typing import List, Optional
from strawberry.types import Info

from .. import crud
from ..forwarding import ForwardSpec
from ..services.views import tag_view
from .auth import require_actor
from .types import TagType, UserAndTags, UserFilter

USER_FORWARD = ForwardSpec(path="user.user", include=("id",))
USERS_FORWARD = ForwardSpec(path="users.user", include=("id",))
SEARCH_USER_FORWARD = ForwardSpec(path="search_user_simple.user", include=("id",))
PASS_THROUGH = ForwardSpec()


@strawberry.type
class Query:
    @strawberry.field
    def tags(self, info: Info, only_current: bool = False) -> List[TagType]:
        """
        Get a list of unique tags currently available to set.
        """
        require_actor(info)
        tags = crud.tag.get_all(info.context.db, only_current=only_current)
        return [tag_view(tag) for tag in tags]

    @strawberry.field
    async def user(self, info: Info, id: strawberry.ID) -> Optional[UserAndTags]:
        """
        Retrieve a user and their local tags by registration ID.
        """
        require_actor(info)
        return await info.context.registration.forward(info, USER_FORWARD)

    @strawberry.field
    async def users(
        self,
        info: Info,
        n: int,
        pagination_token: Optional[strawberry.ID] = None,
        filter: Optional[UserFilter] = None,
    ) -> List[UserAndTags]:
        """
        Page through registered users.
        """
        require_actor(info)
        return await info.context.registration.forward(info, USERS_FORWARD) or []

    @strawberry.field
    async def search_user_simple(
        self,
        info: Info,
        search: str,
        offset: int,
        n: int,
        filter: Optional[UserFilter] = None,
    ) -> List[UserAndTags]:
        """
        Search through a user's name and email.
        """
        require_actor(info)
        return await info.context.registration.forward(info, SEARCH_USER_FORWARD) or []

    @strawberry.field
    async def question_branches(self, info: Info) -> List[str]:
        """
        All possible question branches
        """
        require_actor(info)
        return await info.context.registration.forward(info, PASS_THROUGH) or []

    @strawberry.field
    async def question_names(
        self, info: Info, branch: Optional[str] = None
    ) -> Optional[List[str]]:
        """
        All possible question names, or names of question in a branch
        """
        require_actor(info)
        return await info.context.registration.forward(info, PASS_THROUGH)
