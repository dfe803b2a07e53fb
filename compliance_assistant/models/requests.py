"""API request models"""
from typing import Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    message: Optional[str] = None
    user_role: Optional[str] = None
    user_id: Optional[str] = None
    timestamp: Optional[str] = None
