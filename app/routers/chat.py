from fastapi import APIRouter, Depends, HTTPException, Response

from app.deps import get_chat_controller, get_chat_service
from app.schemas.chat import ChatQueryRequest, ChatResponse, ChatSession
from app.services.chat_service import ChatServiceError, InterviewPrepChatService
from app.services.chat_session import ChatSessionController, SessionBusyError

router = APIRouter(prefix="/api/chat", tags=["chat"])


# 1) 단발 질문 (세션 없이)
# POST /api/chat/query
@router.post("/query", response_model=ChatResponse)
def ask(
    body: ChatQueryRequest,
    service: InterviewPrepChatService = Depends(get_chat_service),
):
    try:
        return service.get_chat_response(body.query)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"message": "invalid_request_body", "detail": str(e)},
        )
    except ChatServiceError as e:
        raise HTTPException(
            status_code=500,
            detail={"message": "chat_failed", "detail": str(e)},
        )


# 2) 세션 복원
# GET /api/chat/sessions/{session_id}
@router.get("/sessions/{session_id}", response_model=ChatSession)
def get_session(
    session_id: str,
    controller: ChatSessionController = Depends(get_chat_controller),
):
    return controller.get_session(session_id)


# 3) 세션에 질문 제출
# POST /api/chat/sessions/{session_id}/messages
@router.post("/sessions/{session_id}/messages", response_model=ChatSession)
async def post_message(
    session_id: str,
    body: ChatQueryRequest,
    controller: ChatSessionController = Depends(get_chat_controller),
):
    if not body.query.strip():
        raise HTTPException(
            status_code=400,
            detail={"message": "invalid_request_body", "detail": "query must not be empty"},
        )
    try:
        return await controller.submit(session_id, body.query.strip())
    except SessionBusyError:
        raise HTTPException(
            status_code=409,
            detail={"message": "session_busy", "detail": "A response is still being prepared"},
        )


# 4) 세션 삭제 (탭 종료)
# DELETE /api/chat/sessions/{session_id}
@router.delete("/sessions/{session_id}", status_code=204)
def clear_session(
    session_id: str,
    controller: ChatSessionController = Depends(get_chat_controller),
):
    controller.clear_session(session_id)
    return Response(status_code=204)
