from datetime import datetime, timedelta

import pytest

from uniride.database import crud
from uniride.database.models import Flexibility, RideStatus
from uniride.service.matching import (
    InvalidDateRangeError,
    MatchWindow,
    find_matches,
    find_matches_for_ride,
    find_matches_in_range,
    tolerance_hours,
)

T = datetime(2025, 9, 1, 8, 0)


def make_user(db, email, college="MIT"):
    return crud.create_user(db, email=email, password="pw", name=email.split("@")[0],
                            college=college)


def make_ride(db, user, at=T, location="Station1", direction="toCampus",
              flexibility="moderate"):
    return crud.create_ride(db, user_id=user.id, location=location,
                            direction=direction, departure_time=at,
                            flexibility=flexibility)


@pytest.mark.parametrize("flexibility, hours", [
    ("strict", 1),
    ("moderate", 3),
    ("flexible", 6),
    ("whenever", 6),
    (Flexibility.STRICT, 1),
])
def test_tolerance_hours(flexibility, hours):
    assert tolerance_hours(flexibility) == hours


def test_window_around_is_inclusive():
    window = MatchWindow.around(T, "moderate")
    assert window.start == T - timedelta(hours=3)
    assert window.end == T + timedelta(hours=3)
    assert T + timedelta(hours=3) in window
    assert T - timedelta(hours=3) in window
    assert T + timedelta(hours=3, seconds=1) not in window


def test_window_between_rejects_inverted_range():
    with pytest.raises(InvalidDateRangeError):
        MatchWindow.between(T, T - timedelta(minutes=1))
    assert MatchWindow.between(T, T) == MatchWindow(T, T)


def test_moderate_and_flexible_example(db):
    alice = make_user(db, "alice@mit.edu")
    bob = make_user(db, "bob@mit.edu")
    carol = make_user(db, "carol@mit.edu")
    ride_a = make_ride(db, alice, flexibility="moderate")
    ride_b = make_ride(db, bob, at=T + timedelta(hours=2))
    ride_c = make_ride(db, carol, at=T + timedelta(hours=4))

    assert [r.id for r in find_matches_for_ride(db, ride_a)] == [ride_b.id]

    flexible = find_matches(db, alice.id, "MIT", "Station1", "toCampus", T, "flexible")
    assert [r.id for r in flexible] == [ride_b.id, ride_c.id]


def test_strict_excludes_rides_beyond_one_hour(db):
    alice = make_user(db, "alice@mit.edu")
    bob = make_user(db, "bob@mit.edu")
    near = make_ride(db, bob, at=T - timedelta(minutes=60))
    make_ride(db, bob, at=T + timedelta(minutes=61))

    matches = find_matches(db, alice.id, "MIT", "Station1", "toCampus", T, "strict")
    assert [r.id for r in matches] == [near.id]


def test_matches_exclude_mismatched_rides(db):
    alice = make_user(db, "alice@mit.edu")
    bob = make_user(db, "bob@mit.edu")
    yale = make_user(db, "dan@yale.edu", college="Yale University")
    own = make_ride(db, alice)
    good = make_ride(db, bob)
    make_ride(db, yale)
    make_ride(db, bob, location="Station2")
    make_ride(db, bob, location="station1")
    make_ride(db, bob, direction="fromCampus")
    cancelled = make_ride(db, bob)
    crud.update_ride_status(db, cancelled.id, bob.id, RideStatus.CANCELLED.value)

    matches = find_matches_for_ride(db, own)
    assert [r.id for r in matches] == [good.id]


def test_matches_are_ordered_by_departure(db):
    alice = make_user(db, "alice@mit.edu")
    bob = make_user(db, "bob@mit.edu")
    later = make_ride(db, bob, at=T + timedelta(hours=2))
    earlier = make_ride(db, bob, at=T - timedelta(hours=2))
    middle = make_ride(db, bob, at=T)

    matches = find_matches(db, alice.id, "MIT", "Station1", "toCampus", T, "flexible")
    assert [r.id for r in matches] == [earlier.id, middle.id, later.id]


def test_unknown_requester_gets_no_matches(db):
    bob = make_user(db, "bob@mit.edu")
    make_ride(db, bob)
    assert find_matches(db, 9999, "MIT", "Station1", "toCampus", T, "flexible") == []


def test_range_matches_are_inclusive(db):
    alice = make_user(db, "alice@mit.edu")
    bob = make_user(db, "bob@mit.edu")
    first = make_ride(db, bob, at=T)
    last = make_ride(db, bob, at=T + timedelta(days=1))
    make_ride(db, bob, at=T + timedelta(days=1, seconds=1))

    matches = find_matches_in_range(db, alice.id, "MIT", "Station1", "toCampus",
                                    T, T + timedelta(days=1))
    assert [r.id for r in matches] == [first.id, last.id]


def test_range_matches_reject_inverted_range(db):
    alice = make_user(db, "alice@mit.edu")
    with pytest.raises(InvalidDateRangeError):
        find_matches_in_range(db, alice.id, "MIT", "Station1", "toCampus",
                              T, T - timedelta(hours=1))
