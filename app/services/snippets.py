from app.schemas.experience import Experience, RelevanceMatch

SNIPPET_LENGTH = 150
QUESTION_LENGTH = 100
ELLIPSIS = "..."


# 후기 -> 채팅 출처 카드
def to_relevance_match(experience: Experience) -> RelevanceMatch:
    text = experience.full_text
    snippet = text[:SNIPPET_LENGTH]
    if len(text) > SNIPPET_LENGTH:
        snippet += ELLIPSIS

    # 첫 라운드 대표 질문
    if experience.rounds:
        question = experience.rounds[0].leading_question
        if question:
            snippet += f" Key Question: {question[:QUESTION_LENGTH]}{ELLIPSIS}"

    return RelevanceMatch(
        id=experience.id,
        company=experience.company,
        role=experience.role,
        snippet=snippet.strip(),
    )
