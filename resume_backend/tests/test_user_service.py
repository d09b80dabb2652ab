import asyncio

import pytest

from src.models.user import UserRegister
from src.services.user_service import SaveResult, UserService


def _user(email: str) -> UserRegister:
    # save() stores whatever is in password; the controller puts the hash there
    return UserRegister(email=email, password="$2b$04$notreallyahashbutlongenough", name=" Ana ", last_name="Lopez")


@pytest.mark.parametrize("provider", ["memory_provider", "sqlite_provider"])
def test_save_and_lookup(provider, request):
    request.getfixturevalue(provider)
    service = UserService()

    assert asyncio.run(service.save(_user("Ana@Example.com"))) == SaveResult.CREATED

    stored = asyncio.run(service.get_user_by_email("  ANA@example.com "))
    assert stored is not None
    assert stored.email == "ana@example.com"
    assert stored.name == "Ana"
    assert stored.password.startswith("$2b$04$")
    assert stored.created_at

    assert asyncio.run(service.get_user_by_id(stored.id)) == stored
    assert asyncio.run(service.get_user_by_id("missing")) is None
    assert asyncio.run(service.get_user_by_email("nobody@example.com")) is None


@pytest.mark.parametrize("provider", ["memory_provider", "sqlite_provider"])
def test_second_insert_with_same_email_reports_conflict(provider, request):
    request.getfixturevalue(provider)
    service = UserService()

    assert asyncio.run(service.save(_user("dup@example.com"))) == SaveResult.CREATED
    assert asyncio.run(service.save(_user("DUP@example.com"))) == SaveResult.CONFLICT
    assert len(asyncio.run(service.get_all_users())) == 1


@pytest.mark.parametrize("provider", ["memory_provider", "sqlite_provider"])
def test_get_all_users_is_public_projection_in_creation_order(provider, request):
    request.getfixturevalue(provider)
    service = UserService()

    assert asyncio.run(service.get_all_users()) == []
    for email in ("one@example.com", "two@example.com"):
        asyncio.run(service.save(_user(email)))

    users = asyncio.run(service.get_all_users())
    assert [u.email for u in users] == ["one@example.com", "two@example.com"]
    assert all("password" not in u.model_dump() for u in users)
