import pytest

from app.services.advice import AdviceSynthesizer
from app.services.chat_service import ChatServiceError, InterviewPrepChatService
from app.services.relevance_matcher import RelevanceMatcher
from app.services.supabase_client import ExperienceStore
from tests.fakes import FakeSupabase, make_row


def _service(fake):
    return InterviewPrepChatService(RelevanceMatcher(ExperienceStore(fake)), AdviceSynthesizer())


def test_google_query_end_to_end():
    fake = FakeSupabase(rows=[make_row(id=str(i)) for i in range(3)])

    response = _service(fake).get_chat_response(
        "I have an interview with Google for Software Engineer role"
    )

    assert fake.last.call("or_")[0][1] == ("company.ilike.%google%",)
    assert len(response.relevant_experience_snippets) == 3
    assert response.advice.startswith("Based on 3 real Google interview experiences:")
    assert response.advice.count("**Google - Software Engineer:**") == 3
    assert "**Google-specific tips:**" in response.advice


def test_system_design_without_records():
    fake = FakeSupabase(rows=[])

    response = _service(fake).get_chat_response("Help me prepare for system design interview")

    assert response.relevant_experience_snippets == []
    assert response.advice.startswith("**System Design Interview Tips:**")


def test_stop_length_query_skips_lookup():
    fake = FakeSupabase(rows=[make_row()])

    response = _service(fake).get_chat_response("asdf qq")

    assert fake.executed == []
    assert response.advice.startswith("I'd be happy to help")


def test_lookup_error_is_invisible_to_advice():
    failing = FakeSupabase(error=ConnectionError("boom"))

    response = _service(failing).get_chat_response("stripe onsite")
    no_terms = _service(FakeSupabase()).get_chat_response("asdf qq")

    assert response.relevant_experience_snippets == []
    assert response.advice == no_terms.advice


def test_blank_query_rejected():
    with pytest.raises(ValueError):
        _service(FakeSupabase()).get_chat_response("   ")


def test_unexpected_error_is_wrapped():
    class BrokenSynthesizer:
        def synthesize(self, query, matches):
            raise KeyError("template")

    service = InterviewPrepChatService(RelevanceMatcher(ExperienceStore(FakeSupabase())), BrokenSynthesizer())

    with pytest.raises(ChatServiceError, match="Please try again"):
        service.get_chat_response("google")
