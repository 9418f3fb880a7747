"""
채팅 세션 (탭 단위 대화 기록)

- 질문 제출 시 사용자 메시지 + "생각 중" 자리표시 메시지 추가
- 답변/오류가 오면 자리표시 메시지를 교체
- timeout_seconds 가 지나면 loading 만 해제 (요청 자체는 취소하지 않음)
  늦게 도착한 답변도 자리표시 메시지를 교체한다 (마지막 쓰기 우선)
"""
import asyncio
import logging
from typing import Dict, List, Optional, Set

from app.schemas.chat import ChatMessage, ChatSession
from app.schemas.experience import RelevanceMatch
from app.services.chat_service import InterviewPrepChatService

logger = logging.getLogger(__name__)

SESSION_KEY = "interview-prep-chat"

GREETING = (
    "Hi! I'm your AI interview prep assistant. Tell me about your upcoming "
    "interview and I'll help you prepare with relevant experiences from other candidates."
)
THINKING = "Thinking..."
ERROR_TEXT = "Sorry, something went wrong while preparing your answer. Please try again."
ERROR_NOTICE = "Failed to get a response from the assistant."


class SessionBusyError(Exception):
    pass


class ChatSessionStore:
    """세션 ID -> 직렬화된 대화 기록 (JSON)"""

    def __init__(self, key: str = SESSION_KEY):
        self.key = key
        self._data: Dict[str, str] = {}

    def _key(self, session_id: str) -> str:
        return f"{self.key}:{session_id}"

    def exists(self, session_id: str) -> bool:
        return self._key(session_id) in self._data

    def load(self, session_id: str) -> ChatSession:
        raw = self._data.get(self._key(session_id))
        if raw is None:
            return ChatSession(
                session_id=session_id,
                messages=[ChatMessage(sender="assistant", text=GREETING)],
            )
        return ChatSession.model_validate_json(raw)

    def save(self, session: ChatSession) -> None:
        self._data[self._key(session.session_id)] = session.model_dump_json()

    def clear(self, session_id: str) -> None:
        self._data.pop(self._key(session_id), None)


class ChatSessionController:
    def __init__(
        self,
        service: InterviewPrepChatService,
        store: ChatSessionStore,
        timeout_seconds: float = 30.0,
    ):
        self.service = service
        self.store = store
        self.timeout_seconds = timeout_seconds
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def in_flight(self) -> Set[asyncio.Task]:
        return set(self._in_flight)

    def get_session(self, session_id: str) -> ChatSession:
        return self.store.load(session_id)

    def clear_session(self, session_id: str) -> None:
        self.store.clear(session_id)

    async def submit(self, session_id: str, query: str) -> ChatSession:
        session = self.store.load(session_id)
        if session.loading:
            raise SessionBusyError(session_id)

        placeholder = ChatMessage(sender="assistant", text=THINKING, pending=True)
        session.messages.append(ChatMessage(sender="user", text=query))
        session.messages.append(placeholder)
        session.loading = True
        session.notice = None
        self.store.save(session)

        task = asyncio.create_task(self._answer(session_id, placeholder.id, query))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

        done, _ = await asyncio.wait({task}, timeout=self.timeout_seconds)
        if not done:
            # 입력창만 다시 열어줌. 요청은 계속 진행된다
            logger.warning("[CHAT] session=%s timed out after %.1fs", session_id, self.timeout_seconds)
            session = self.store.load(session_id)
            session.loading = False
            self.store.save(session)

        return self.store.load(session_id)

    async def _answer(self, session_id: str, placeholder_id: str, query: str) -> None:
        try:
            response = await asyncio.to_thread(self.service.get_chat_response, query)
        except Exception:
            logger.exception("[CHAT] session=%s response failed", session_id)
            self._replace(session_id, placeholder_id, ERROR_TEXT, [], notice=ERROR_NOTICE)
            return

        self._replace(
            session_id,
            placeholder_id,
            response.advice,
            response.relevant_experience_snippets,
        )

    def _replace(
        self,
        session_id: str,
        placeholder_id: str,
        text: str,
        sources: List[RelevanceMatch],
        notice: Optional[str] = None,
    ) -> None:
        if not self.store.exists(session_id):
            logger.info("[CHAT] session=%s cleared before response arrived", session_id)
            return

        session = self.store.load(session_id)
        for message in session.messages:
            if message.id == placeholder_id:
                message.text = text
                message.sources = list(sources)
                message.pending = False
                break
        else:
            logger.info("[CHAT] session=%s placeholder %s not found", session_id, placeholder_id)
            return

        session.loading = False
        if notice:
            session.notice = notice
        self.store.save(session)
