# tests/crud/test_tag.py
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from checkin import crud
from checkin.schemas.tag import TagCreate


def test_tag_create_normalizes_name():
    tag_in = TagCreate(name="  HackGT ")

    assert tag_in.name == "hackgt"
    assert tag_in.warn_on_duplicates is False


def test_tag_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        TagCreate(name="   ")


def test_tag_create_requires_complete_window():
    with pytest.raises(ValidationError):
        TagCreate(name="dinner", start=datetime.now(timezone.utc))


def test_tag_create_rejects_backwards_window():
    now = datetime.now(timezone.utc)

    with pytest.raises(ValidationError):
        TagCreate(name="dinner", start=now, end=now - timedelta(hours=1))


def test_create_and_get_by_name(db_session):
    created = crud.tag.create(
        db_session, obj_in=TagCreate(name="HackGT", warn_on_duplicates=True)
    )

    assert created.name == "hackgt"
    found = crud.tag.get_by_name(db_session, name="HACKGT")
    assert found is not None
    assert found.warn_on_duplicates is True
    assert crud.tag.get_by_name(db_session, name="missing") is None


def test_get_all_lists_tags_by_name(db_session, make_tag):
    make_tag("lunch")
    make_tag("dinner")

    assert [tag.name for tag in crud.tag.get_all(db_session)] == ["dinner", "lunch"]


def test_get_all_only_current_filters_by_window(db_session, make_tag):
    now = datetime.now(timezone.utc)
    make_tag("always")
    make_tag("open", start=now - timedelta(hours=1), end=now + timedelta(hours=1))
    make_tag("past", start=now - timedelta(days=2), end=now - timedelta(days=1))
    make_tag("future", start=now + timedelta(days=1), end=now + timedelta(days=2))

    current = [tag.name for tag in crud.tag.get_all(db_session, only_current=True)]
    everything = [tag.name for tag in crud.tag.get_all(db_session)]

    assert current == ["always", "open"]
    assert everything == ["always", "future", "open", "past"]


def test_tag_create_compares_naive_and_aware_bounds_as_utc():
    tag_in = TagCreate(
        name="dinner",
        start=datetime(2026, 1, 1, 18, 0),
        end=datetime(2026, 1, 1, 20, 0, tzinfo=timezone(timedelta(hours=1))),
    )

    assert tag_in.start == datetime(2026, 1, 1, 18, 0, tzinfo=timezone.utc)
    assert tag_in.end == datetime(2026, 1, 1, 19, 0, tzinfo=timezone.utc)
    assert tag_in.start.tzinfo is timezone.utc


def test_tag_create_rejects_mixed_offset_window_ending_before_start():
    with pytest.raises(ValidationError):
        TagCreate(
            name="dinner",
            start=datetime(2026, 1, 2),
            end=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
