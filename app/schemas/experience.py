from pydantic import BaseModel, Field, field_validator, model_validator
import datetime as dt
from typing import Optional, List, Literal

# -- Stored rows --

# 면접 라운드 (후기 안에 포함, 독립 ID 없음)
class Round(BaseModel):
    type: str = ""
    difficulty: Optional[str] = None
    questions: List[str] = Field(default_factory=list)
    answers: List[str] = Field(default_factory=list)
    experience: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_question(cls, data):
        # 예전 행은 question 단일 문자열로 저장되어 있음
        if isinstance(data, dict) and "questions" not in data and data.get("question"):
            data = {**data, "questions": [data["question"]]}
        return data

    @property
    def leading_question(self) -> Optional[str]:
        for q in self.questions:
            if q and q.strip():
                return q
        return None


# 면접 후기 (interview_posts 행)
class Experience(BaseModel):
    id: str
    company: str
    role: str
    user_name: str = "Anonymous"
    user_id: Optional[str] = None
    date: Optional[dt.date] = None
    rounds: List[Round] = Field(default_factory=list)
    full_text: str = ""
    average_rating: Optional[float] = Field(None, ge=0, le=5)
    rating_count: Optional[int] = None
    upvote_count: int = 0
    created_at: Optional[dt.datetime] = None

    @field_validator("rounds", mode="before")
    @classmethod
    def _rounds_or_empty(cls, v):
        # jsonb 컬럼이 null 이거나 배열이 아닐 수 있음
        return v if isinstance(v, list) else []

    @field_validator("full_text", mode="before")
    @classmethod
    def _full_text_or_empty(cls, v):
        return v or ""


# -- Response --

# 채팅 응답에 붙는 출처 (저장하지 않음)
class RelevanceMatch(BaseModel):
    id: str
    company: str
    role: str
    snippet: str


# -- Request --

class RoundIn(BaseModel):
    type: str = Field(..., min_length=1, description="라운드 종류")
    questions: List[str] = Field(..., min_length=1, description="질문 목록")
    answers: List[str] = Field(default_factory=list, description="답변 목록")
    difficulty: Literal["Easy", "Medium", "Hard"]
    experience: str = Field(..., min_length=10, description="라운드 후기")


# 면접 후기 등록 - 요청
class ExperienceSubmitRequest(BaseModel):
    company: str = Field(..., min_length=1, description="회사명")
    role: str = Field(..., min_length=1, description="직무명")
    date: Optional[dt.date] = Field(None, description="면접 일자")
    rounds: List[RoundIn] = Field(..., min_length=1, description="면접 라운드 목록")
    is_anonymous: bool = False


ExperienceOrder = Literal["created_at", "average_rating", "upvote_count"]


# 후기 수정 - 요청 (작성자만, 보낸 필드만 반영)
class ExperienceUpdateRequest(BaseModel):
    company: Optional[str] = Field(None, min_length=1, description="회사명")
    role: Optional[str] = Field(None, min_length=1, description="직무명")
    date: Optional[dt.date] = Field(None, description="면접 일자")
    rounds: Optional[List[RoundIn]] = Field(None, min_length=1, description="면접 라운드 목록")


# -- 평점 / 추천 / 댓글 --

class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="별점 1~5")


class RatingSummary(BaseModel):
    experience_id: str
    average_rating: float = 0
    rating_count: int = 0
    user_rating: Optional[int] = None


class UpvoteStatus(BaseModel):
    experience_id: str
    upvoted: bool
    upvote_count: int


class Comment(BaseModel):
    id: str
    experience_id: str
    user_id: str
    user_name: str = "Anonymous"
    comment: str
    created_at: Optional[dt.datetime] = None


class CommentRequest(BaseModel):
    comment: str = Field(..., min_length=1, description="댓글 내용")
