# tests/graphql/test_auth.py
from types import SimpleNamespace

import pytest

from checkin.core.errors import AuthenticationError
from checkin.graphql.auth import require_actor


def info_for(user):
    return SimpleNamespace(context=SimpleNamespace(user=user))


def test_actor_is_username_claim():
    assert require_actor(info_for({"sub": "u-1", "username": "staff1"})) == "staff1"


def test_actor_falls_back_to_subject():
    assert require_actor(info_for({"sub": "u-1"})) == "u-1"


@pytest.mark.parametrize("user", [None, {}, {"username": ""}])
def test_anonymous_requests_are_rejected(user):
    with pytest.raises(AuthenticationError) as exc_info:
        require_actor(info_for(user))

    assert exc_info.value.message == "You must log in to access this endpoint"
