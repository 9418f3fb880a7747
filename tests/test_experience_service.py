import pytest
from fastapi import HTTPException

from app.schemas.experience import ExperienceSubmitRequest, ExperienceUpdateRequest
from app.services.experience_service import (
    ExperienceService,
    build_full_text,
    clean_rounds,
    display_name,
)
from app.services.supabase_client import ExperienceStore
from tests.fakes import FakeSupabase, make_row


def _payload(**overrides):
    data = {
        "company": "Stripe",
        "role": "Backend Engineer",
        "date": "2025-04-01",
        "rounds": [
            {
                "type": "coding",
                "questions": ["Design a rate limiter", " "],
                "answers": ["Token bucket", ""],
                "difficulty": "Hard",
                "experience": "Whiteboard round, 60 minutes",
            }
        ],
    }
    data.update(overrides)
    return ExperienceSubmitRequest.model_validate(data)


def test_clean_rounds_drops_blank_entries():
    rounds = clean_rounds(_payload().rounds)

    assert rounds[0]["questions"] == ["Design a rate limiter"]
    assert rounds[0]["answers"] == ["Token bucket"]


def test_full_text_starts_with_company_and_role():
    rounds = clean_rounds(_payload().rounds)
    text = build_full_text("Stripe", "Backend Engineer", rounds)

    assert text.startswith("Stripe Backend Engineer ")
    assert "Design a rate limiter" in text
    assert "Whiteboard round" in text
    assert "Token bucket" in text


def test_display_name_fallbacks():
    assert display_name({"full_name": "Jo Park", "email": "jo@x.io"}) == "Jo Park"
    assert display_name({"email": "jo@x.io"}) == "jo"
    assert display_name({}) == "Anonymous"
    assert display_name({"full_name": "Jo"}, is_anonymous=True) == "Anonymous"


def test_submit_inserts_denormalized_row():
    fake = FakeSupabase()
    service = ExperienceService(ExperienceStore(fake))

    created = service.submit_experience({"id": "user-9", "email": "sam@corp.com"}, _payload())

    inserted = fake.last.inserted
    assert inserted["user_id"] == "user-9"
    assert inserted["user_name"] == "sam"
    assert inserted["date"] == "2025-04-01"
    assert inserted["full_text"].startswith("Stripe Backend Engineer")
    assert created.id == "new-id"
    assert created.rounds[0].questions == ["Design a rate limiter"]


def test_submit_rejects_round_with_only_blank_questions():
    payload = _payload(rounds=[{
        "type": "coding", "questions": ["  "], "difficulty": "Easy",
        "experience": "nothing to report here",
    }])

    with pytest.raises(HTTPException) as exc:
        ExperienceService(ExperienceStore(FakeSupabase())).submit_experience({"id": "u"}, payload)
    assert exc.value.status_code == 422


def test_submit_store_error_is_500():
    service = ExperienceService(ExperienceStore(FakeSupabase(error=RuntimeError("duplicate month"))))

    with pytest.raises(HTTPException) as exc:
        service.submit_experience({"id": "u"}, _payload())
    assert exc.value.status_code == 500
    assert exc.value.detail["message"] == "experience_creation_failed"


def test_search_failure_returns_empty():
    service = ExperienceService(ExperienceStore(FakeSupabase(error=RuntimeError("down"))))

    assert service.search("google") == []


def test_blank_search_skips_lookup():
    fake = FakeSupabase(rows=[make_row()])

    assert ExperienceService(ExperienceStore(fake)).search("   ") == []
    assert fake.executed == []


def test_get_missing_experience_is_404():
    with pytest.raises(HTTPException) as exc:
        ExperienceService(ExperienceStore(FakeSupabase())).get_experience("nope")
    assert exc.value.status_code == 404


def test_search_skips_row_that_fails_validation():
    fake = FakeSupabase(rows=[make_row(id="bad", average_rating=7)])

    assert ExperienceService(ExperienceStore(fake)).search("google") == []


def test_search_keeps_valid_rows_next_to_bad_one():
    fake = FakeSupabase(rows=[make_row(id="good"), make_row(id="bad", average_rating=7)])

    found = ExperienceService(ExperienceStore(fake)).search("google")

    assert [e.id for e in found] == ["good"]


def test_list_skips_malformed_rows():
    fake = FakeSupabase(rows=[make_row(id="a"), make_row(id="b", rounds=[{"type": None}])])

    assert [e.id for e in ExperienceService(ExperienceStore(fake)).list_experiences()] == ["a"]


# -- 수정 --

OWNER = {"id": "user-1", "email": "alice@corp.com"}


def test_owner_update_rebuilds_full_text():
    fake = FakeSupabase(rows=[make_row(id="e1")])
    service = ExperienceService(ExperienceStore(fake))

    updated = service.update_experience(
        OWNER, "e1", ExperienceUpdateRequest(company="Alphabet", role="SRE")
    )

    assert updated.company == "Alphabet"
    assert updated.full_text.startswith("Alphabet SRE coding-round Reverse a linked list")
    assert fake.last.call("eq")[0][1] == ("id", "e1")
    assert set(fake.last.updated) == {"company", "role", "full_text"}


def test_update_rounds_replaces_rounds():
    fake = FakeSupabase(rows=[make_row(id="e1")])
    payload = ExperienceUpdateRequest.model_validate({"rounds": _payload().model_dump()["rounds"]})

    updated = ExperienceService(ExperienceStore(fake)).update_experience(OWNER, "e1", payload)

    assert updated.rounds[0].questions == ["Design a rate limiter"]
    assert updated.full_text.startswith("Google Software Engineer coding Design a rate limiter")


def test_non_owner_cannot_update():
    fake = FakeSupabase(rows=[make_row(id="e1")])

    with pytest.raises(HTTPException) as exc:
        ExperienceService(ExperienceStore(fake)).update_experience(
            {"id": "someone-else"}, "e1", ExperienceUpdateRequest(role="PM")
        )
    assert exc.value.status_code == 403
    assert all(q.updated is None for q in fake.executed)


def test_empty_update_is_noop():
    fake = FakeSupabase(rows=[make_row(id="e1")])

    result = ExperienceService(ExperienceStore(fake)).update_experience(OWNER, "e1", ExperienceUpdateRequest())

    assert result.id == "e1"
    assert all(q.updated is None for q in fake.executed)


# -- 별점 --

def test_rate_upserts_and_summarizes():
    fake = FakeSupabase(
        rows=[make_row(id="e1")],
        tables={"experience_ratings": [{"id": "r0", "experience_id": "e1", "user_id": "other", "rating": 2}]},
    )
    service = ExperienceService(ExperienceStore(fake))

    summary = service.rate({"id": "u1"}, "e1", 4)
    assert (summary.rating_count, summary.average_rating, summary.user_rating) == (2, 3.0, 4)

    summary = service.rate({"id": "u1"}, "e1", 5)
    assert (summary.rating_count, summary.average_rating, summary.user_rating) == (2, 3.5, 5)

    upserts = [q for q in fake.executed if q.upserted is not None]
    assert upserts[0].table == "experience_ratings"
    assert upserts[0].call("upsert")[0][2] == {"on_conflict": "user_id,experience_id"}


def test_rate_unknown_experience_is_404():
    with pytest.raises(HTTPException) as exc:
        ExperienceService(ExperienceStore(FakeSupabase())).rate({"id": "u1"}, "missing", 3)
    assert exc.value.status_code == 404


def test_rating_summary_without_ratings():
    summary = ExperienceService(ExperienceStore(FakeSupabase())).rating_summary("e1")

    assert (summary.average_rating, summary.rating_count, summary.user_rating) == (0, 0, None)


# -- 추천 --

def test_upvote_is_idempotent_and_removable():
    fake = FakeSupabase(rows=[make_row(id="e1")])
    service = ExperienceService(ExperienceStore(fake))

    assert service.upvote({"id": "u1"}, "e1").model_dump() == {
        "experience_id": "e1", "upvoted": True, "upvote_count": 1,
    }
    assert service.upvote({"id": "u1"}, "e1").upvote_count == 1
    assert service.upvote({"id": "u2"}, "e1").upvote_count == 2

    status = service.remove_upvote({"id": "u1"}, "e1")
    assert (status.upvoted, status.upvote_count) == (False, 1)


def test_upvote_store_error_is_500():
    fake = FakeSupabase(rows=[make_row(id="e1")])
    service = ExperienceService(ExperienceStore(fake))
    fake.error = RuntimeError("down")

    with pytest.raises(HTTPException) as exc:
        service.remove_upvote({"id": "u1"}, "e1")
    assert exc.value.detail["message"] == "upvote_failed"


# -- 댓글 --

def test_comments_add_list_delete():
    fake = FakeSupabase(rows=[make_row(id="e1")])
    service = ExperienceService(ExperienceStore(fake))

    comment = service.add_comment({"id": "u1", "email": "min@corp.com"}, "e1", "  Thanks, very helpful  ")
    assert (comment.user_name, comment.comment) == ("min", "Thanks, very helpful")

    listed = service.list_comments("e1")
    assert [c.id for c in listed] == [comment.id]
    assert fake.last.call("order")[0] == ("order", ("created_at",), {"desc": True})

    with pytest.raises(HTTPException) as exc:
        service.delete_comment({"id": "intruder"}, comment.id)
    assert exc.value.status_code == 404

    service.delete_comment({"id": "u1"}, comment.id)
    assert service.list_comments("e1") == []


def test_blank_comment_rejected():
    with pytest.raises(HTTPException) as exc:
        ExperienceService(ExperienceStore(FakeSupabase(rows=[make_row(id="e1")]))).add_comment({"id": "u1"}, "e1", "   ")
    assert exc.value.status_code == 422
