# checkin/graphql/auth.py
from strawberry.types import Info

from ..core.errors import AuthenticationError


def require_actor(info: Info) -> str:
    """
    Returns the staff member behind the request, the JWT `username` claim
    falling back to `sub`. Every field of the API requires one.
    """
    user = info.context.user
    actor = user and (user.get("username") or user.get("sub"))
    if not actor:
        raise AuthenticationError()
    return actor
