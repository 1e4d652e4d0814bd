from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from uniride.database import crud
from uniride.database.models import Role
from uniride.security import verify_password

from .conftest import ADMIN_EMAIL

T = datetime(2025, 9, 1, 8, 0)


def test_create_user_hashes_password(db):
    user = crud.create_user(db, "alice@mit.edu", "hunter2", "Alice", "MIT")
    assert user.hashed_password != "hunter2"
    assert verify_password("hunter2", user.hashed_password)
    assert not verify_password("hunter3", user.hashed_password)


def test_duplicate_email_is_a_conflict(db):
    crud.create_user(db, "alice@mit.edu", "pw", "Alice", "MIT")
    with pytest.raises(crud.DuplicateEmailError):
        crud.create_user(db, "alice@mit.edu", "pw", "Alice Again", "MIT")
    assert len(crud.get_all_users(db)) == 1


def test_role_comes_from_admin_email(db):
    admin = crud.create_user(db, ADMIN_EMAIL, "pw", "Admin", "Other")
    user = crud.create_user(db, "bob@mit.edu", "pw", "Bob", "MIT")
    assert admin.role == Role.ADMIN.value
    assert user.role == Role.USER.value


def test_ride_owner_must_exist(db):
    with pytest.raises(IntegrityError):
        crud.create_ride(db, user_id=42, location="Station1", direction="toCampus",
                         departure_time=T, flexibility="strict")


def test_mutations_require_owner(db):
    alice = crud.create_user(db, "alice@mit.edu", "pw", "Alice", "MIT")
    bob = crud.create_user(db, "bob@mit.edu", "pw", "Bob", "MIT")
    ride_id = crud.create_ride(db, alice.id, "Station1", "toCampus", T, "strict").id

    assert not crud.update_ride_status(db, ride_id, bob.id, "cancelled")
    assert not crud.update_ride(db, ride_id, bob.id, "Station2", "fromCampus", T, "flexible")
    assert not crud.delete_ride(db, ride_id, bob.id)

    assert crud.update_ride(db, ride_id, alice.id, "Station2", "fromCampus", T, "flexible")
    db.expire_all()
    assert crud.get_ride(db, ride_id).location == "Station2"
    assert crud.delete_ride(db, ride_id, alice.id)
    assert crud.get_ride(db, ride_id) is None


def test_listings_only_show_active_rides(db):
    alice = crud.create_user(db, "alice@mit.edu", "pw", "Alice", "MIT")
    kept = crud.create_ride(db, alice.id, "Station1", "toCampus", T, "strict")
    dropped = crud.create_ride(db, alice.id, "Station1", "toCampus", T, "strict")
    crud.update_ride_status(db, dropped.id, alice.id, "cancelled")

    assert [r.id for r in crud.get_user_rides(db, alice.id)] == [kept.id]
    assert [r.id for r in crud.get_college_rides(db, "MIT")] == [kept.id]
    assert {r.id for r in crud.get_all_rides(db)} == {kept.id, dropped.id}


def test_emails_are_case_insensitive(db):
    user = crud.create_user(db, "Alice@MIT.edu", "pw", "Alice", "MIT")
    assert user.email == "alice@mit.edu"
    assert crud.get_user_by_email(db, "ALICE@mit.EDU").id == user.id
    with pytest.raises(crud.DuplicateEmailError):
        crud.create_user(db, "alice@mit.edu", "pw", "Alice Again", "MIT")
