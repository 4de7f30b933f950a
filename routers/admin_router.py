"""
Admin Router - moderation of every user's todos
"""
from typing import List
from fastapi import APIRouter, Body, Depends

from auth import get_todo_service, require_admin
from backend.auth.user import Actor
from backend.utils.responses import success_response
from models.todo import AdminTodoDelete, AdminTodoUpdate, TodoOut
from services.todo_service import TodoService

admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/todos", response_model=List[TodoOut])
async def list_all_todos(
    actor: Actor = Depends(require_admin),
    todo_service: TodoService = Depends(get_todo_service),
):
    """Every user's todos, newest first"""
    return await todo_service.list_all_todos(actor)


@admin_router.put("/todos", response_model=TodoOut)
async def update_any_todo(
    request: AdminTodoUpdate = Body(...),
    actor: Actor = Depends(require_admin),
    todo_service: TodoService = Depends(get_todo_service),
):
    return await todo_service.update_todo(actor, request.id, completed=request.completed)


@admin_router.delete("/todos")
async def delete_any_todo(
    request: AdminTodoDelete = Body(...),
    actor: Actor = Depends(require_admin),
    todo_service: TodoService = Depends(get_todo_service),
):
    await todo_service.delete_todo(actor, request.id)
    return success_response({"id": request.id}, message="Todo deleted successfully")
