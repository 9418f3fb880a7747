"""
면접 준비 채팅 비즈니스 로직
- 관련 후기 매칭
- 조언 텍스트 생성
"""
import logging

from app.schemas.chat import ChatResponse
from app.services.advice import AdviceSynthesizer
from app.services.relevance_matcher import RelevanceMatcher
from app.services.snippets import to_relevance_match

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to generate response. Please try again."


class ChatServiceError(Exception):
    pass


class InterviewPrepChatService:
    """질문 하나 -> 조언 + 출처"""

    def __init__(self, matcher: RelevanceMatcher, synthesizer: AdviceSynthesizer):
        self.matcher = matcher
        self.synthesizer = synthesizer

    def get_chat_response(self, query: str) -> ChatResponse:
        """
        Args:
            query: 사용자 질문 (공백만 있으면 안 됨)

        Returns:
            ChatResponse(advice, relevant_experience_snippets)

        Raises:
            ValueError: 빈 질문
            ChatServiceError: 그 외 예기치 못한 오류
        """
        if not query or not query.strip():
            raise ValueError("query must not be empty")

        logger.info("[CHAT] processing query=%r", query)
        try:
            experiences = self.matcher.find_experiences(query)
            matches = [to_relevance_match(e) for e in experiences]
            advice = self.synthesizer.synthesize(query, matches)
        except Exception as e:
            logger.exception("[CHAT] failed to build response")
            raise ChatServiceError(FAILURE_MESSAGE) from e

        logger.info("[CHAT] generated advice from %d experiences", len(matches))
        return ChatResponse(advice=advice, relevant_experience_snippets=matches)
