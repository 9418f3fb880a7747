# app/deps.py
import logging

from fastapi import Depends, Header, HTTPException, Request

from app.config import settings
from app.services.advice import AdviceSynthesizer
from app.services.chat_service import InterviewPrepChatService
from app.services.chat_session import ChatSessionController, ChatSessionStore
from app.services.experience_service import ExperienceService
from app.services.relevance_matcher import RelevanceMatcher
from app.services.supa_auth import verify_bearer
from app.services.supabase_client import ExperienceStore, get_supabase

logger = logging.getLogger(__name__)

# ----------------------------
# 후기 테이블 (app.state 에 한 번만 생성)
# ----------------------------
def get_experience_store(request: Request) -> ExperienceStore:
    store = getattr(request.app.state, "experience_store", None)
    if store is None:
        store = ExperienceStore(get_supabase(), settings.experiences_table)
        request.app.state.experience_store = store
    return store

# ----------------------------
# 서비스
# ----------------------------
def get_chat_service(store: ExperienceStore = Depends(get_experience_store)) -> InterviewPrepChatService:
    matcher = RelevanceMatcher(store, limit=settings.chat_match_limit)
    return InterviewPrepChatService(matcher, AdviceSynthesizer())


def get_experience_service(store: ExperienceStore = Depends(get_experience_store)) -> ExperienceService:
    return ExperienceService(store, search_limit=settings.search_limit)


def get_chat_controller(
    request: Request,
    service: InterviewPrepChatService = Depends(get_chat_service),
) -> ChatSessionController:
    # 진행 중인 요청을 추적해야 하므로 컨트롤러는 앱 당 하나
    controller = getattr(request.app.state, "chat_controller", None)
    if controller is None:
        sessions = getattr(request.app.state, "chat_sessions", None) or ChatSessionStore()
        controller = ChatSessionController(
            service, sessions, timeout_seconds=settings.chat_timeout_seconds
        )
        request.app.state.chat_controller = controller
    return controller

# ----------------------------
# 현재 사용자 가져오기
# ----------------------------
async def get_current_user(
    authorization: str | None = Header(None),
):
    try:
        claims = await verify_bearer(authorization)
    except ValueError as e:
        logger.info("verify_bearer failed >>> %r", e)
        raise HTTPException(status_code=401, detail={"message": "unauthorized", "detail": str(e)})
    except RuntimeError as e:
        # 서버 설정 누락 (SUPABASE_JWT_SECRET)
        logger.error("auth not configured: %s", e)
        raise HTTPException(status_code=500, detail={"message": "auth_not_configured", "detail": str(e)})

    return {
        "id": claims["user_id"],
        "email": claims.get("email"),
        "full_name": claims.get("full_name"),
    }
