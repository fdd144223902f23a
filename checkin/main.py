# checkin/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from checkin.core.config import settings
from checkin.db.redis import get_redis_client
from checkin.forwarding import RegistrationClient
from checkin.graphql.router import graphql_router
from checkin.services.check_in import CheckInStateMachine
from checkin.services.notifier import ChangeNotifier, RedisChangeNotifier

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_notifier() -> ChangeNotifier:
    if settings.NOTIFIER_BACKEND == "redis":
        return RedisChangeNotifier(get_redis_client())
    return ChangeNotifier(max_queue_size=settings.NOTIFIER_QUEUE_SIZE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Builds the long-lived collaborators resolvers receive through the context."""
    logger.info("Check-in service starting up...")
    notifier = create_notifier()
    registration = RegistrationClient(
        settings.REGISTRATION_GRAPHQL,
        settings.REGISTRATION_KEY,
        timeout=settings.REGISTRATION_TIMEOUT,
    )
    app.state.notifier = notifier
    app.state.registration = registration
    app.state.check_in = CheckInStateMachine(notifier)
    logger.info(
        f"Forwarding identity queries to {settings.REGISTRATION_GRAPHQL}, "
        f"notifier backend: {settings.NOTIFIER_BACKEND}"
    )
    yield
    logger.info("Check-in service shutting down...")
    await registration.close()
    await notifier.close()


app = FastAPI(
    title="Check-in Service",
    version="1.0.0",
    description="""
        **Event check-in**

        Staff check attendees in and out per tag. Attendee identity lives in
        the registration service; identity fields requested here are
        forwarded to it transparently.

        * **Tags**: named check-in scopes with optional validity windows
        * **Check-in / check-out**: audited, duplicate-aware transitions
        * **Live updates**: subscribe to `tag_change` for every transition
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(graphql_router, prefix="/graphql")


@app.get("/")
def read_root():
    return {"status": "Check-in Service is running"}
