from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List, Literal
from uuid import uuid4

from app.schemas.experience import RelevanceMatch


def _now() -> datetime:
    return datetime.now(timezone.utc)


# -- Request --

class ChatQueryRequest(BaseModel):
    query: str = Field(..., min_length=1, description="사용자 질문")


# -- Response --

class ChatResponse(BaseModel):
    advice: str
    relevant_experience_snippets: List[RelevanceMatch] = Field(default_factory=list)


# 대화 한 턴 (세션 저장소에만 존재)
class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    sender: Literal["user", "assistant"]
    text: str
    timestamp: datetime = Field(default_factory=_now)
    sources: List[RelevanceMatch] = Field(default_factory=list)
    pending: bool = False


class ChatSession(BaseModel):
    session_id: str
    messages: List[ChatMessage] = Field(default_factory=list)
    loading: bool = False
    notice: Optional[str] = None  # 일회성 알림 (toast)
