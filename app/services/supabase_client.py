from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from supabase import create_client, Client

from app.config import settings

# (column, term) 한 쌍 = "column ILIKE %term%"
Clause = Tuple[str, str]

# PostgREST 필터 문법 예약 문자
_RESERVED = set(',.:()"')


# supabase client 초기화 (최초 호출 시)
@lru_cache(maxsize=1)
def get_supabase() -> Client:
    supabase_url = settings.supabase_url
    supabase_key = settings.supabase_service_role_key or settings.supabase_anon_key

    if not supabase_key or not supabase_url:
        raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in .env")

    return create_client(supabase_url, supabase_key)


def _ilike_value(term: str) -> str:
    value = f"%{term}%"
    if any(ch in _RESERVED for ch in term):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def build_or_filter(clauses: Sequence[Clause]) -> str:
    """
    [("company", "google")] -> "company.ilike.%google%"
    여러 개면 콤마로 이어서 OR 조건이 된다.
    """
    return ",".join(f"{column}.ilike.{_ilike_value(term)}" for column, term in clauses)


class ExperienceStore:
    """interview_posts 테이블 접근"""

    def __init__(
        self,
        client: Client,
        table: str = "interview_posts",
        ratings_table: str = "experience_ratings",
        upvotes_table: str = "experience_upvotes",
        comments_table: str = "experience_comments",
    ):
        self.client = client
        self.table = table
        self.ratings_table = ratings_table
        self.upvotes_table = upvotes_table
        self.comments_table = comments_table

    def _select(self):
        return self.client.table(self.table).select("*")

    # 조건 중 하나라도 맞는 후기 조회 (채팅 매칭용)
    def find_any(self, clauses: Sequence[Clause], limit: int) -> List[Dict]:
        response = self._select().or_(build_or_filter(clauses)).limit(limit).execute()
        return response.data if response.data else []

    # 키워드 검색 (회사/직무/본문), 평점순
    def search(self, term: str, limit: int) -> List[Dict]:
        clauses = [("company", term), ("role", term), ("full_text", term)]
        response = (
            self._select()
            .or_(build_or_filter(clauses))
            .order("average_rating", desc=True)
            .order("rating_count", desc=True)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data if response.data else []

    # 목록 조회 (필터/정렬)
    def list(
        self,
        order_by: str = "created_at",
        ascending: bool = False,
        company: Optional[str] = None,
        role: Optional[str] = None,
        has_ratings: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict]:
        query = self._select()
        if has_ratings:
            query = query.gt("rating_count", 0)
        if company:
            query = query.ilike("company", f"%{company}%")
        if role:
            query = query.ilike("role", f"%{role}%")

        query = query.order(order_by, desc=not ascending)
        if order_by == "average_rating":
            query = query.order("rating_count", desc=True)

        if limit:
            query = query.limit(limit)
        response = query.execute()
        return response.data if response.data else []

    # 후기 조회 (ID로)
    def get_by_id(self, experience_id: str) -> Optional[Dict]:
        response = self._select().eq("id", experience_id).execute()
        return response.data[0] if response.data else None

    # 후기 저장
    def create(self, data: Dict) -> Optional[Dict]:
        response = self.client.table(self.table).insert(data).execute()
        return response.data[0] if response.data else None

    # 후기 수정 (작성자 확인은 서비스에서)
    def update(self, experience_id: str, data: Dict) -> Optional[Dict]:
        response = self.client.table(self.table).update(data).eq("id", experience_id).execute()
        return response.data[0] if response.data else None

    # --experience_ratings table--

    # 별점 저장 (사용자당 1개, 다시 주면 덮어씀)
    def upsert_rating(self, experience_id: str, user_id: str, rating: int) -> Optional[Dict]:
        response = (
            self.client.table(self.ratings_table)
            .upsert(
                {"experience_id": experience_id, "user_id": user_id, "rating": rating},
                on_conflict="user_id,experience_id",
            )
            .execute()
        )
        return response.data[0] if response.data else None

    def get_ratings(self, experience_id: str) -> List[Dict]:
        response = (
            self.client.table(self.ratings_table)
            .select("user_id,rating")
            .eq("experience_id", experience_id)
            .execute()
        )
        return response.data if response.data else []

    # --experience_upvotes table--

    def get_upvotes(self, experience_id: str) -> List[Dict]:
        response = (
            self.client.table(self.upvotes_table)
            .select("user_id")
            .eq("experience_id", experience_id)
            .execute()
        )
        return response.data if response.data else []

    def add_upvote(self, experience_id: str, user_id: str) -> Optional[Dict]:
        response = (
            self.client.table(self.upvotes_table)
            .insert({"experience_id": experience_id, "user_id": user_id})
            .execute()
        )
        return response.data[0] if response.data else None

    def delete_upvote(self, experience_id: str, user_id: str) -> bool:
        response = (
            self.client.table(self.upvotes_table)
            .delete()
            .eq("user_id", user_id)
            .eq("experience_id", experience_id)
            .execute()
        )
        return len(response.data or []) > 0

    # --experience_comments table--

    def get_comments(self, experience_id: str) -> List[Dict]:
        response = (
            self.client.table(self.comments_table)
            .select("*")
            .eq("experience_id", experience_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data if response.data else []

    def create_comment(self, data: Dict) -> Optional[Dict]:
        response = self.client.table(self.comments_table).insert(data).execute()
        return response.data[0] if response.data else None

    # 본인 댓글만 삭제됨 (user_id 조건)
    def delete_comment(self, comment_id: str, user_id: str) -> bool:
        response = (
            self.client.table(self.comments_table)
            .delete()
            .eq("id", comment_id)
            .eq("user_id", user_id)
            .execute()
        )
        return len(response.data or []) > 0
