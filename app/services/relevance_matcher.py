"""
채팅 질문 -> 관련 면접 후기 매칭
- 질문을 한 개의 카테고리로 분류 (규칙표 순서대로, 먼저 맞는 것 우선)
- 분류 결과로 Supabase 조회 1회
- 조회 실패는 로그만 남기고 빈 결과로 처리
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from app.schemas.experience import Experience
from app.services.experience_service import parse_experiences
from app.services.matching_rules import DEFAULT_RULES, KeywordPolicy, MatchRule
from app.services.supabase_client import Clause, ExperienceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchPlan:
    category: str              # company / interview_type / role / keyword
    name: str                  # 규칙 이름 (keyword 면 "keyword")
    clauses: Tuple[Clause, ...]


class RelevanceMatcher:
    def __init__(
        self,
        store: ExperienceStore,
        rules: Sequence[MatchRule] = DEFAULT_RULES,
        keyword_policy: KeywordPolicy = KeywordPolicy(),
        limit: int = 5,
    ):
        self.store = store
        self.rules = tuple(rules)
        self.keyword_policy = keyword_policy
        self.limit = limit

    def classify(self, query: str) -> Optional[MatchPlan]:
        text = query.lower()

        for rule in self.rules:
            if rule.matches(text):
                return MatchPlan(rule.category, rule.name, rule.clauses)

        keywords = self.keyword_policy.keywords(text)
        if not keywords:
            return None
        return MatchPlan("keyword", "keyword", tuple(("full_text", k) for k in keywords))

    def find_experiences(self, query: str) -> List[Experience]:
        logger.info("[MATCH] searching experiences for query=%r", query)

        plan = self.classify(query)
        if plan is None:
            logger.info("[MATCH] no searchable terms, skip lookup")
            return []

        logger.debug("[MATCH] plan category=%s name=%s clauses=%d",
                     plan.category, plan.name, len(plan.clauses))
        try:
            rows = self.store.find_any(plan.clauses, self.limit)
        except Exception:
            logger.exception("[MATCH] experience lookup failed")
            return []

        experiences = parse_experiences(rows)
        logger.info("[MATCH] found %d experiences", len(experiences))
        return experiences
