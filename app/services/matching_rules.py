"""
채팅 질문 분류 규칙표

- 카테고리 순서 = 우선순위 (company > interview_type > role)
- 규칙 순서 = 같은 카테고리 안에서의 우선순위
- 트리거 중 하나라도 질문(소문자)에 포함되면 해당 규칙이 선택된다
"""
from dataclasses import dataclass, field
from typing import Tuple

from app.services.supabase_client import Clause


@dataclass(frozen=True)
class MatchRule:
    category: str
    name: str
    triggers: Tuple[str, ...]
    clauses: Tuple[Clause, ...]

    def matches(self, text: str) -> bool:
        return any(t in text for t in self.triggers)


def _company(name: str, *aliases: str) -> MatchRule:
    names = (name,) + aliases
    return MatchRule(
        category="company",
        name=name,
        triggers=names,
        clauses=tuple(("company", n) for n in names),
    )


COMPANY_RULES = (
    _company("google"),
    _company("microsoft"),
    _company("amazon"),
    _company("meta", "facebook"),
    _company("apple"),
    _company("netflix"),
    _company("uber"),
    _company("airbnb"),
)

INTERVIEW_TYPE_RULES = (
    MatchRule(
        category="interview_type",
        name="system design",
        triggers=("system design",),
        clauses=(
            ("full_text", "system design"),
            ("full_text", "scalability"),
            ("full_text", "architecture"),
        ),
    ),
    MatchRule(
        category="interview_type",
        name="behavioral",
        triggers=("behavioral",),
        clauses=(
            ("full_text", "behavioral"),
            ("full_text", "leadership"),
            ("full_text", "conflict"),
        ),
    ),
    MatchRule(
        category="interview_type",
        name="coding",
        triggers=("coding", "algorithm"),
        clauses=(
            ("full_text", "coding"),
            ("full_text", "algorithm"),
            ("full_text", "leetcode"),
        ),
    ),
    MatchRule(
        category="interview_type",
        name="technical",
        triggers=("technical",),
        clauses=(
            ("full_text", "technical"),
            ("full_text", "programming"),
        ),
    ),
)

ROLE_RULES = (
    MatchRule(
        category="role",
        name="software engineer",
        triggers=("software engineer", "sde"),
        clauses=(
            ("role", "software"),
            ("role", "sde"),
            ("role", "engineer"),
        ),
    ),
    MatchRule(
        category="role",
        name="frontend",
        triggers=("frontend", "front-end"),
        clauses=(
            ("role", "frontend"),
            ("role", "front-end"),
            ("full_text", "react"),
            ("full_text", "javascript"),
        ),
    ),
    MatchRule(
        category="role",
        name="backend",
        triggers=("backend", "back-end"),
        clauses=(
            ("role", "backend"),
            ("role", "back-end"),
            ("full_text", "api"),
            ("full_text", "server"),
        ),
    ),
    MatchRule(
        category="role",
        name="data scientist",
        triggers=("data scientist", "data science"),
        clauses=(
            ("role", "data"),
            ("full_text", "machine learning"),
            ("full_text", "statistics"),
        ),
    ),
)

DEFAULT_RULES = COMPANY_RULES + INTERVIEW_TYPE_RULES + ROLE_RULES

# 일반 키워드 검색에서 버리는 단어
STOP_WORDS = frozenset(
    ["interview", "question", "help", "with", "about", "what", "how", "the", "and", "for"]
)
MIN_KEYWORD_LENGTH = 4


@dataclass(frozen=True)
class KeywordPolicy:
    stop_words: frozenset = field(default=STOP_WORDS)
    min_length: int = MIN_KEYWORD_LENGTH

    def keywords(self, text: str) -> Tuple[str, ...]:
        return tuple(
            t for t in text.split()
            if len(t) >= self.min_length and t not in self.stop_words
        )
