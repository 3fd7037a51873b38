from pydantic import BaseModel, Field, ConfigDict
from typing import List


class Message(BaseModel):
    """One turn of the assistant conversation"""
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "role": "user",
                    "content": "Which astrologer should I book for a marriage compatibility reading?"
                }
            ]
        }
    )


class ChatRequest(BaseModel):
    messages: List[Message]
