"""
질문 + 매칭된 후기 -> 조언 텍스트 (markdown)

I/O 없음, 예외 없음. 같은 입력이면 항상 같은 문자열을 만든다.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from app.schemas.experience import RelevanceMatch

BULLET = "• "


@dataclass(frozen=True)
class TopicTips:
    trigger: str
    short_title: str                # 후기와 함께 붙는 짧은 팁
    short_tips: Tuple[str, ...]
    full_title: str                 # 후기가 없을 때 단독 팁
    full_tips: Tuple[str, ...]


DEFAULT_TOPICS = (
    TopicTips(
        trigger="system design",
        short_title="System Design Tips",
        short_tips=(
            "Start by clarifying requirements and constraints",
            "Design high-level architecture first",
            "Discuss data storage and database choices",
            "Consider scalability, load balancing, and caching",
        ),
        full_title="System Design Interview Tips",
        full_tips=(
            "Start by clarifying requirements and constraints",
            "Design high-level architecture first",
            "Discuss data storage and database choices",
            "Consider scalability, load balancing, and caching",
            "Talk about monitoring and failure handling",
            "Draw diagrams to visualize your design",
            "Discuss trade-offs between different approaches",
        ),
    ),
    TopicTips(
        trigger="behavioral",
        short_title="Behavioral Interview Tips",
        short_tips=(
            "Use the STAR method (Situation, Task, Action, Result)",
            "Prepare 3-5 detailed examples from past experiences",
            "Focus on leadership, problem-solving, and teamwork",
            "Be specific with metrics and outcomes",
        ),
        full_title="Behavioral Interview Tips",
        full_tips=(
            "Use the STAR method (Situation, Task, Action, Result)",
            "Prepare 3-5 detailed examples from past experiences",
            "Focus on leadership, problem-solving, and teamwork",
            "Be specific with metrics and outcomes",
            'Practice common questions like "Tell me about a time when..."',
            "Show growth mindset and learning from failures",
        ),
    ),
    TopicTips(
        trigger="coding",
        short_title="Coding Interview Tips",
        short_tips=(
            "Practice on LeetCode, HackerRank, or similar platforms",
            "Master data structures and algorithms",
            "Think out loud during the interview",
            "Start with brute force, then optimize",
        ),
        full_title="Coding Interview Tips",
        full_tips=(
            "Practice on LeetCode, HackerRank, or similar platforms",
            "Master data structures (arrays, trees, graphs, hash tables)",
            "Learn algorithms (sorting, searching, dynamic programming)",
            "Think out loud during the interview",
            "Start with brute force, then optimize",
            "Test your code with examples",
            "Ask clarifying questions about requirements",
        ),
    ),
)

COMPANY_TIPS = (
    "Research {company}'s recent projects and engineering culture",
    "Practice problems similar to {company}'s interview style",
    "Prepare for their specific behavioral question patterns",
    "Review the role requirements carefully",
)

ONBOARDING_EXAMPLES = (
    'Specific companies: "Google software engineer interview"',
    'Interview types: "system design interview tips"',
    'Behavioral interviews: "behavioral interview questions"',
    'Coding prep: "coding interview preparation"',
)


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(BULLET + line for line in lines)


class AdviceSynthesizer:
    def __init__(self, topics: Sequence[TopicTips] = DEFAULT_TOPICS):
        self.topics = tuple(topics)

    def detect_topic(self, query: str):
        text = query.lower()
        for topic in self.topics:
            if topic.trigger in text:
                return topic
        return None

    def synthesize(self, query: str, matches: Sequence[RelevanceMatch]) -> str:
        if not matches:
            return self._general_advice(query)

        # 등장 순서 유지한 중복 제거
        companies = list(dict.fromkeys(m.company for m in matches))
        if len(companies) == 1:
            return self._company_advice(companies[0], matches)
        return self._mixed_advice(query, matches)

    @staticmethod
    def _match_blocks(matches: Sequence[RelevanceMatch]) -> str:
        return "".join(f"**{m.company} - {m.role}:**\n{m.snippet}\n\n" for m in matches)

    def _company_advice(self, company: str, matches: Sequence[RelevanceMatch]) -> str:
        count = len(matches)
        plural = "s" if count > 1 else ""
        parts: List[str] = [
            f"Based on {count} real {company} interview experience{plural}:\n\n",
            self._match_blocks(matches),
            f"**{company}-specific tips:**\n",
            _bullets([tip.format(company=company) for tip in COMPANY_TIPS]),
        ]
        return "".join(parts)

    def _mixed_advice(self, query: str, matches: Sequence[RelevanceMatch]) -> str:
        parts: List[str] = [
            f"Based on {len(matches)} relevant interview experiences:\n\n",
            self._match_blocks(matches),
        ]
        topic = self.detect_topic(query)
        if topic is not None:
            parts.append(f"**{topic.short_title}:**\n")
            parts.append(_bullets(topic.short_tips))
        return "".join(parts)

    def _general_advice(self, query: str) -> str:
        topic = self.detect_topic(query)
        if topic is not None:
            return f"**{topic.full_title}:**\n\n" + _bullets(topic.full_tips)

        return (
            "I'd be happy to help with your interview preparation!\n\n"
            "**For specific advice, try asking about:**\n"
            + _bullets(ONBOARDING_EXAMPLES)
            + "\n\nWhat specific aspect of interview prep would you like help with?"
        )
