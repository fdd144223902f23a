# checkin/graphql/schema.py

import strawberry
from strawberry.schema.config import StrawberryConfig

from .extensions import RequestVariables
from .mutations import Mutation
from .queries import Query
from .subscriptions import Subscription
from .types import resolve_key_or_attribute

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    extensions=[RequestVariables],
    config=StrawberryConfig(
        # Wire names match the registration service (check_in, checked_in_by, ...)
        auto_camel_case=False,
        default_resolver=resolve_key_or_attribute,
    ),
)
