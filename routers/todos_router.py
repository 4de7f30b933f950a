"""
Todo Router - the caller's own todos
"""

from typing import List
from fastapi import APIRouter, Body, Depends

from auth import get_current_actor, get_todo_service
from backend.auth.user import Actor
from backend.utils.responses import success_response
from models.todo import TodoCreate, TodoOut, TodoUpdate
from services.todo_service import TodoService

todos_router = APIRouter(prefix="/todos", tags=["todos"])


@todos_router.get("", response_model=List[TodoOut])
async def list_todos(
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
):
    """Caller's todos, newest first"""
    return await todo_service.list_todos(actor)


@todos_router.post("", response_model=TodoOut, status_code=201)
async def create_todo(
    request: TodoCreate = Body(...),
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
):
    return await todo_service.create_todo(actor, request.title)


@todos_router.get("/{todo_id}", response_model=TodoOut)
async def get_todo(
    todo_id: str,
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
):
    return await todo_service.get_todo(actor, todo_id)


@todos_router.put("/{todo_id}", response_model=TodoOut)
async def update_todo(
    todo_id: str,
    request: TodoUpdate = Body(...),
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
):
    return await todo_service.update_todo(
        actor, todo_id, completed=request.completed, title=request.title
    )


@todos_router.delete("/{todo_id}")
async def delete_todo(
    todo_id: str,
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
):
    await todo_service.delete_todo(actor, todo_id)
    return success_response({"id": todo_id}, message="Todo deleted successfully")
