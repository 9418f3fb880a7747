from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from app.deps import get_current_user, get_experience_service
from app.schemas.experience import (
    Comment,
    CommentRequest,
    Experience,
    ExperienceOrder,
    ExperienceSubmitRequest,
    ExperienceUpdateRequest,
    RatingRequest,
    RatingSummary,
    UpvoteStatus,
)
from app.services.experience_service import ExperienceService

router = APIRouter(prefix="/api/experiences", tags=["experiences"])


# 1) 키워드 검색 (회사/직무/본문)
# GET /api/experiences/search?q=
@router.get("/search", response_model=List[Experience])
def search_experiences(
    q: str = Query(..., min_length=1),
    limit: Optional[int] = Query(None, ge=1, le=50),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.search(q, limit)


# 2) 목록 (최신순 / 평점순 / 추천순)
# GET /api/experiences
@router.get("", response_model=List[Experience])
def list_experiences(
    order_by: ExperienceOrder = "created_at",
    ascending: bool = False,
    company: Optional[str] = None,
    role: Optional[str] = None,
    has_ratings: bool = False,
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.list_experiences(
        order_by=order_by,
        ascending=ascending,
        company=company,
        role=role,
        has_ratings=has_ratings,
        limit=limit,
    )


# 3) 상세
# GET /api/experiences/{experience_id}
@router.get("/{experience_id}", response_model=Experience)
def get_experience(
    experience_id: str,
    service: ExperienceService = Depends(get_experience_service),
):
    return service.get_experience(experience_id)


# 4) 후기 등록
# POST /api/experiences
@router.post("", response_model=Experience, status_code=201)
def submit_experience(
    body: ExperienceSubmitRequest,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.submit_experience(current_user, body)


# 5) 후기 수정 (작성자만)
# PATCH /api/experiences/{experience_id}
@router.patch("/{experience_id}", response_model=Experience)
def update_experience(
    experience_id: str,
    body: ExperienceUpdateRequest,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.update_experience(current_user, experience_id, body)


# 6) 별점 요약 / 별점 주기
# GET /api/experiences/{experience_id}/rating
@router.get("/{experience_id}/rating", response_model=RatingSummary)
def get_rating(
    experience_id: str,
    service: ExperienceService = Depends(get_experience_service),
):
    return service.rating_summary(experience_id)


# PUT /api/experiences/{experience_id}/rating
@router.put("/{experience_id}/rating", response_model=RatingSummary)
def rate_experience(
    experience_id: str,
    body: RatingRequest,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.rate(current_user, experience_id, body.rating)


# 7) 추천 / 추천 취소
# POST /api/experiences/{experience_id}/upvote
@router.post("/{experience_id}/upvote", response_model=UpvoteStatus)
def upvote_experience(
    experience_id: str,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.upvote(current_user, experience_id)


# DELETE /api/experiences/{experience_id}/upvote
@router.delete("/{experience_id}/upvote", response_model=UpvoteStatus)
def remove_upvote(
    experience_id: str,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.remove_upvote(current_user, experience_id)


# 8) 댓글
# GET /api/experiences/{experience_id}/comments
@router.get("/{experience_id}/comments", response_model=List[Comment])
def list_comments(
    experience_id: str,
    service: ExperienceService = Depends(get_experience_service),
):
    return service.list_comments(experience_id)


# POST /api/experiences/{experience_id}/comments
@router.post("/{experience_id}/comments", response_model=Comment, status_code=201)
def add_comment(
    experience_id: str,
    body: CommentRequest,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    return service.add_comment(current_user, experience_id, body.comment)


# DELETE /api/experiences/comments/{comment_id}
@router.delete("/comments/{comment_id}", status_code=204)
def delete_comment(
    comment_id: str,
    current_user=Depends(get_current_user),
    service: ExperienceService = Depends(get_experience_service),
):
    service.delete_comment(current_user, comment_id)
    return Response(status_code=204)
