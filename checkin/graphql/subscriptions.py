# checkin/graphql/subscriptions.py
from typing import AsyncGenerator

import strawberry
from strawberry.types import Info

from ..services.notifier import TAG_CHANGE
from .auth import require_actor
from .types import UserAndTags


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def tag_change(self, info: Info) -> AsyncGenerator[UserAndTags, None]:
        """
        Every committed check-in or check-out, duplicates included.
        Clients filter by the tags they display.
        """
        require_actor(info)
        async for payload in info.context.notifier.subscribe(TAG_CHANGE):
            yield payload
