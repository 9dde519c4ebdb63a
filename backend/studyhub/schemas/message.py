"""Message Schemas: post payload and log entries."""

from datetime import datetime

from pydantic import BaseModel, Field


class MessagePost(BaseModel):
    message: str = Field(max_length=5000)


class MessageResponse(BaseModel):
    id: int
    group_id: int
    user_id: int
    display_name: str
    message: str
    sent_at: datetime
