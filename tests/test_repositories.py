"""
Unit tests for UserRepository and TodoRepository
"""
import asyncio

import pytest
from sqlalchemy import func, select

from crud.todo import TodoRepository
from crud.user import UserRepository
from database_models import User


@pytest.mark.asyncio
async def test_get_or_create_user_is_idempotent(test_db):
    user_repo = UserRepository(test_db)

    created = await user_repo.get_or_create_user("user_a")
    assert created.id == "user_a"
    assert created.is_subscribed is False
    assert created.subscription_ends is None

    again = await user_repo.get_or_create_user("user_a")
    assert again.id == created.id

    assert await user_repo.get_user_by_id("missing") is None


@pytest.mark.asyncio
async def test_create_count_and_list_todos(test_db):
    await UserRepository(test_db).create_user("user_a")
    await UserRepository(test_db).create_user("user_b")
    todo_repo = TodoRepository(test_db)

    first = await todo_repo.create_todo("user_a", "first")
    second = await todo_repo.create_todo("user_a", "second")
    await todo_repo.create_todo("user_b", "other")
    await test_db.commit()

    assert first.completed is False
    assert first.created_at is not None
    assert await todo_repo.count_todos_for_user("user_a") == 2
    assert await todo_repo.count_todos_for_user("user_b") == 1

    mine = await todo_repo.list_todos_for_user("user_a")
    assert {t.id for t in mine} == {first.id, second.id}
    assert all(t.user_id == "user_a" for t in mine)
    assert [t.created_at for t in mine] == sorted((t.created_at for t in mine), reverse=True)

    everyone = await todo_repo.list_all_todos()
    assert len(everyone) == 3


@pytest.mark.asyncio
async def test_update_only_touches_mutable_fields(test_db):
    await UserRepository(test_db).create_user("user_a")
    todo_repo = TodoRepository(test_db)
    todo = await todo_repo.create_todo("user_a", "write tests")
    created_at = todo.created_at

    updated = await todo_repo.update_todo(
        todo, {"completed": True, "title": "write more tests", "user_id": "user_b"}
    )

    assert updated.completed is True
    assert updated.title == "write more tests"
    assert updated.user_id == "user_a"
    assert updated.created_at == created_at


@pytest.mark.asyncio
async def test_delete_todo_reports_missing_rows(test_db):
    await UserRepository(test_db).create_user("user_a")
    todo_repo = TodoRepository(test_db)
    todo = await todo_repo.create_todo("user_a", "temporary")

    assert await todo_repo.delete_todo(todo.id) is True
    assert await todo_repo.delete_todo(todo.id) is False
    assert await todo_repo.count_todos_for_user("user_a") == 0


@pytest.mark.asyncio
async def test_update_subscription(test_db):
    user_repo = UserRepository(test_db)
    user = await user_repo.create_user("user_a")

    updated = await user_repo.update_subscription(user, is_subscribed=True, subscription_ends=None)

    assert updated.is_subscribed is True


@pytest.mark.asyncio
async def test_concurrent_first_requests_provision_one_user(file_session_factory):
    async def provision():
        async with file_session_factory() as session:
            user = await UserRepository(session).get_or_create_user("user_new")
            await session.commit()
            return user.id

    results = await asyncio.gather(*(provision() for _ in range(3)))

    assert results == ["user_new"] * 3
    async with file_session_factory() as session:
        total = await session.execute(select(func.count()).select_from(User))
        assert total.scalar_one() == 1
