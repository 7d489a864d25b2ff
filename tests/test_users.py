from datetime import timedelta

import pytest
from fastapi import HTTPException

from app.core.jwt import create_access_token
from app.users.models import User
from app.users.utils import get_current_user


def add_user(session, email, is_active=True):
    session.add(User(first_name="Fleet", last_name="Admin", email_address=email, is_active=is_active))


def test_current_user_is_loaded_from_token(session_scope, run):
    async def scenario():
        async with session_scope() as session:
            add_user(session, "admin@example.com")
            await session.commit()
            token = create_access_token({"sub": "admin@example.com"})
            return await get_current_user(token=token, db=session)

    user = run(scenario())

    assert user.email_address == "admin@example.com"
    assert user.name == "Fleet Admin"


@pytest.mark.parametrize("email, is_active", [
    ("gone@example.com", True),
    ("admin@example.com", False),
])
def test_unknown_or_inactive_user_is_rejected(session_scope, run, email, is_active):
    async def scenario():
        async with session_scope() as session:
            add_user(session, "admin@example.com", is_active=is_active)
            await session.commit()
            token = create_access_token({"sub": email})
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(token=token, db=session)
            return exc_info.value

    error = run(scenario())

    assert error.status_code == 401
    assert error.detail == "User not found or inactive."


def test_expired_token_is_rejected(session_scope, run):
    async def scenario():
        async with session_scope() as session:
            token = create_access_token({"sub": "admin@example.com"}, expires_delta=timedelta(minutes=-5))
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(token=token, db=session)
            return exc_info.value

    error = run(scenario())

    assert error.status_code == 401
    assert error.detail == "Token has expired"
