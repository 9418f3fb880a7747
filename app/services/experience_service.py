"""
면접 후기 관련 비즈니스 로직
- 키워드 검색
- 목록 / 단건 조회
- 후기 등록 / 수정 (검색용 full_text 생성)
- 별점, 추천, 댓글
"""
import logging
from typing import Dict, List, Optional

from fastapi import HTTPException
from pydantic import ValidationError

from app.schemas.experience import (
    Comment,
    Experience,
    ExperienceSubmitRequest,
    ExperienceUpdateRequest,
    RatingSummary,
    RoundIn,
    UpvoteStatus,
)
from app.services.supabase_client import ExperienceStore

logger = logging.getLogger(__name__)


def clean_rounds(rounds: List[RoundIn]) -> List[Dict]:
    """빈 질문/답변 제거"""
    return [
        {
            **r.model_dump(),
            "questions": [q for q in r.questions if q.strip()],
            "answers": [a for a in r.answers if a and a.strip()],
        }
        for r in rounds
    ]


def build_full_text(company: str, role: str, rounds: List[Dict]) -> str:
    """
    검색용 본문. 회사명/직무명이 항상 앞에 들어간다.

    "{company} {role} {type} {questions} {experience} {answers} ..."
    """
    round_texts = [
        f"{r['type']} {' '.join(r['questions'])} {r['experience']} {' '.join(r.get('answers') or [])}"
        for r in rounds
    ]
    return f"{company} {role} {' '.join(round_texts)}"


def display_name(user: Dict, is_anonymous: bool = False) -> str:
    if is_anonymous:
        return "Anonymous"
    if user.get("full_name"):
        return user["full_name"]
    if user.get("email"):
        return user["email"].split("@")[0]
    return "Anonymous"


def parse_experiences(rows: List[Dict]) -> List[Experience]:
    """행 단위 검증. 깨진 행은 로그만 남기고 건너뛴다"""
    experiences = []
    for row in rows:
        try:
            experiences.append(Experience.model_validate(row))
        except ValidationError as e:
            logger.warning("skip malformed experience id=%r: %s", row.get("id"), e)
    return experiences


class ExperienceService:
    def __init__(self, store: ExperienceStore, search_limit: int = 10):
        self.store = store
        self.search_limit = search_limit

    def search(self, query: str, limit: Optional[int] = None) -> List[Experience]:
        term = query.strip()
        if not term:
            return []

        try:
            rows = self.store.search(term, limit or self.search_limit)
            return parse_experiences(rows)
        except Exception:
            logger.exception("Error searching experiences: %r", term)
            return []

    def list_experiences(
        self,
        order_by: str = "created_at",
        ascending: bool = False,
        company: Optional[str] = None,
        role: Optional[str] = None,
        has_ratings: bool = False,
        limit: Optional[int] = None,
    ) -> List[Experience]:
        try:
            rows = self.store.list(
                order_by=order_by,
                ascending=ascending,
                company=company,
                role=role,
                has_ratings=has_ratings,
                limit=limit,
            )
        except Exception as e:
            logger.exception("Error fetching experiences")
            raise HTTPException(
                status_code=502,
                detail={"message": "experiences_fetch_failed", "detail": str(e)},
            )
        return parse_experiences(rows)

    def get_experience(self, experience_id: str) -> Experience:
        row = self.store.get_by_id(experience_id)
        if not row:
            raise HTTPException(
                status_code=404,
                detail={"message": "experience_not_found"},
            )
        return Experience.model_validate(row)

    def submit_experience(self, user: Dict, payload: ExperienceSubmitRequest) -> Experience:
        rounds = clean_rounds(payload.rounds)
        if any(not r["questions"] for r in rounds):
            raise HTTPException(
                status_code=422,
                detail={"message": "invalid_request_body", "detail": "Each round needs at least one question"},
            )

        data = {
            "company": payload.company,
            "role": payload.role,
            "user_name": display_name(user, payload.is_anonymous),
            "user_id": user["id"],
            "date": payload.date.isoformat() if payload.date else None,
            "rounds": rounds,
            "full_text": build_full_text(payload.company, payload.role, rounds),
        }

        try:
            created = self.store.create(data)
        except Exception as e:
            logger.exception("Error submitting experience")
            raise HTTPException(
                status_code=500,
                detail={"message": "experience_creation_failed", "detail": str(e)},
            )

        if not created:
            raise HTTPException(
                status_code=500,
                detail={"message": "experience_creation_failed", "detail": "DB returned no data"},
            )

        logger.info("experience created id=%s company=%s", created.get("id"), payload.company)
        return Experience.model_validate(created)

    # 작성자 확인 포함 조회
    def _get_owned(self, user: Dict, experience_id: str) -> Experience:
        experience = self.get_experience(experience_id)
        if experience.user_id != user["id"]:
            raise HTTPException(
                status_code=403,
                detail={"message": "forbidden", "detail": "Not authorized"},
            )
        return experience

    @staticmethod
    def _store_call(code: str, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            logger.exception("store call failed: %s", code)
            raise HTTPException(
                status_code=500,
                detail={"message": code, "detail": str(e)},
            )

    def update_experience(
        self, user: Dict, experience_id: str, payload: ExperienceUpdateRequest
    ) -> Experience:
        """
        작성자만 company/role/date/rounds 수정 가능.
        셋 중 하나라도 바뀌면 full_text 도 다시 만든다.
        """
        current = self._get_owned(user, experience_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return current

        data: Dict = {}
        if "rounds" in changes:
            rounds = clean_rounds(payload.rounds)
            if any(not r["questions"] for r in rounds):
                raise HTTPException(
                    status_code=422,
                    detail={"message": "invalid_request_body", "detail": "Each round needs at least one question"},
                )
            data["rounds"] = rounds
        else:
            rounds = [r.model_dump() for r in current.rounds]
        if "company" in changes:
            data["company"] = payload.company
        if "role" in changes:
            data["role"] = payload.role
        if "date" in changes:
            data["date"] = payload.date.isoformat()

        data["full_text"] = build_full_text(
            data.get("company", current.company),
            data.get("role", current.role),
            rounds,
        )

        updated = self._store_call("experience_update_failed", self.store.update, experience_id, data)
        if not updated:
            raise HTTPException(
                status_code=500,
                detail={"message": "experience_update_failed", "detail": "DB returned no data"},
            )
        logger.info("experience updated id=%s fields=%s", experience_id, sorted(data))
        return Experience.model_validate(updated)

    # -- 별점 --

    def rating_summary(self, experience_id: str, user: Optional[Dict] = None) -> RatingSummary:
        rows = self._store_call("ratings_fetch_failed", self.store.get_ratings, experience_id)
        ratings = [r["rating"] for r in rows]
        user_rating = None
        if user is not None:
            user_rating = next((r["rating"] for r in rows if r.get("user_id") == user["id"]), None)
        return RatingSummary(
            experience_id=experience_id,
            average_rating=sum(ratings) / len(ratings) if ratings else 0,
            rating_count=len(ratings),
            user_rating=user_rating,
        )

    def rate(self, user: Dict, experience_id: str, rating: int) -> RatingSummary:
        self.get_experience(experience_id)
        self._store_call("rating_failed", self.store.upsert_rating, experience_id, user["id"], rating)
        return self.rating_summary(experience_id, user)

    # -- 추천 --

    def _upvote_status(self, user: Dict, experience_id: str) -> UpvoteStatus:
        rows = self._store_call("upvotes_fetch_failed", self.store.get_upvotes, experience_id)
        return UpvoteStatus(
            experience_id=experience_id,
            upvoted=any(r.get("user_id") == user["id"] for r in rows),
            upvote_count=len(rows),
        )

    def upvote(self, user: Dict, experience_id: str) -> UpvoteStatus:
        self.get_experience(experience_id)
        status = self._upvote_status(user, experience_id)
        if status.upvoted:
            return status
        self._store_call("upvote_failed", self.store.add_upvote, experience_id, user["id"])
        return self._upvote_status(user, experience_id)

    def remove_upvote(self, user: Dict, experience_id: str) -> UpvoteStatus:
        self._store_call("upvote_failed", self.store.delete_upvote, experience_id, user["id"])
        return self._upvote_status(user, experience_id)

    # -- 댓글 --

    def list_comments(self, experience_id: str) -> List[Comment]:
        rows = self._store_call("comments_fetch_failed", self.store.get_comments, experience_id)
        return [Comment.model_validate(r) for r in rows]

    def add_comment(self, user: Dict, experience_id: str, text: str) -> Comment:
        comment = text.strip()
        if not comment:
            raise HTTPException(
                status_code=422,
                detail={"message": "invalid_request_body", "detail": "comment must not be empty"},
            )
        self.get_experience(experience_id)

        data = {
            "experience_id": experience_id,
            "user_id": user["id"],
            "user_name": display_name(user),
            "comment": comment,
        }
        created = self._store_call("comment_creation_failed", self.store.create_comment, data)
        if not created:
            raise HTTPException(
                status_code=500,
                detail={"message": "comment_creation_failed", "detail": "DB returned no data"},
            )
        return Comment.model_validate(created)

    def delete_comment(self, user: Dict, comment_id: str) -> None:
        deleted = self._store_call("comment_delete_failed", self.store.delete_comment, comment_id, user["id"])
        if not deleted:
            raise HTTPException(
                status_code=404,
                detail={"message": "comment_not_found"},
            )
