from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TodoCreate(CamelModel):
    title: Optional[str] = None


class TodoUpdate(CamelModel):
    completed: Optional[bool] = None
    title: Optional[str] = None


class AdminTodoUpdate(CamelModel):
    id: str
    completed: bool


class AdminTodoDelete(CamelModel):
    id: str


class TodoOut(CamelModel):
    id: str
    user_id: str
    title: str
    completed: bool
    created_at: datetime
