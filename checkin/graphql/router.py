# checkin/graphql/router.py
import jwt
from fastapi import Depends
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection
from strawberry.fastapi import BaseContext, GraphQLRouter

from ..core.config import settings
from ..db.session import get_db
from ..forwarding import RegistrationClient
from ..services.check_in import CheckInStateMachine
from ..services.notifier import ChangeNotifier
from .dataloaders import create_dataloaders
from .schema import schema


class CustomContext(BaseContext):
    def __init__(
        self,
        db: Session,
        registration: RegistrationClient,
        notifier: ChangeNotifier,
        check_in: CheckInStateMachine,
        user: dict | None = None,
        loaders: dict | None = None,
    ):
        super().__init__()
        self.db = db
        self.registration = registration
        self.notifier = notifier
        self.check_in = check_in
        self.user = user
        # Filled in per operation by the RequestVariables extension
        self.request_variables: dict = {}
        self.loaders = loaders if loaders is not None else create_dataloaders(db)


def decode_user(authorization: str | None) -> dict | None:
    """Returns the JWT payload from an 'Authorization: Bearer <token>' header."""
    if not authorization:
        return None
    try:
        token = authorization.split(" ")[1]
        return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except (jwt.PyJWTError, IndexError):
        # Invalid or malformed tokens leave the request anonymous
        return None


# HTTPConnection covers both plain requests and subscription websockets.
def get_context(
    connection: HTTPConnection,
    db: Session = Depends(get_db),
) -> CustomContext:
    state = connection.app.state
    return CustomContext(
        db=db,
        registration=state.registration,
        notifier=state.notifier,
        check_in=state.check_in,
        user=decode_user(connection.headers.get("Authorization")),
    )


graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
)
