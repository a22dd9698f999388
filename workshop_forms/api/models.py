from __future__ import annotations

from pydantic import BaseModel, Field


class SessionCreateRequest(BaseModel):
    workshop_slug: str
    user_name: str = Field(description="Name stored by the client; passed through to the response record.")


class FieldUpdateRequest(BaseModel):
    value: str = ""


class SaveResponseRequest(BaseModel):
    user_name: str = ""
    workshop_title: str = ""
    workshop_slug: str = ""
    responses: dict[str, str] = Field(default_factory=dict)
