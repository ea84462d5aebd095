"""Conversation data models."""
from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "assistant"]


@dataclass
class Message:
    """Represents a single turn of the chat history."""
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}
