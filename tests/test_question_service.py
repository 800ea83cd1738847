import random

import pytest

from quizbank.core.exceptions import NotFoundError, ValidationError
from quizbank.services.questions import QuestionService, sample_questions
from tests.conftest import question_payload

def seed(store, records):
    if hasattr(store, "replace_all"):
        store.replace_all(records)
    else:
        store.save(records)

def stored_question(qid, category="math", en=None):
    return dict(question_payload(zh=f"問{qid}", en=en or f"Q{qid}", category=category), id=qid)

@pytest.fixture
def service(question_store):
    return QuestionService(question_store, rng=random.Random(1234))

def test_create_into_empty_store_assigns_id_1(service):
    created = service.create_question(question_payload())
    assert created["id"] == 1
    assert service.get_question(1)["question"] == {"zh": "問題", "en": "Q"}

def test_create_assigns_max_plus_one(service, question_store):
    seed(question_store, [stored_question(3), stored_question(7)])
    assert service.create_question(question_payload())["id"] == 8

def test_create_ignores_client_id(service):
    created = service.create_question(dict(question_payload(), id=99))
    assert created["id"] == 1

@pytest.mark.parametrize("payload", [
    {k: v for k, v in question_payload().items() if k != "answerIndex"},
    dict(question_payload(), question="not an object"),
    dict(question_payload(), options=["A", "B"]),
    dict(question_payload(), question={"zh": "問題"}),
    dict(question_payload(), answerIndex=2),
    dict(question_payload(), answerIndex=-1),
    dict(question_payload(), options={"zh": ["A", "B"], "en": ["A"]}, answerIndex=1),
])
def test_create_rejects_invalid_payload(service, question_store, payload):
    with pytest.raises(ValidationError):
        service.create_question(payload)
    assert question_store.list_all() == []

def test_list_is_ordered_by_id(service, question_store):
    seed(question_store, [stored_question(5), stored_question(2), stored_question(9)])
    assert [q["id"] for q in service.list_questions()] == [2, 5, 9]

def test_get_missing_question(service):
    with pytest.raises(NotFoundError):
        service.get_question(42)

def test_update_merges_and_preserves_id(service, question_store):
    seed(question_store, [stored_question(1)])
    updated = service.update_question(1, {"category": "science", "id": 50})
    assert updated["id"] == 1
    assert updated["category"] == "science"
    assert updated["question"] == {"zh": "問1", "en": "Q1"}
    assert service.get_question(1)["category"] == "science"

def test_update_missing_question(service):
    with pytest.raises(NotFoundError):
        service.update_question(3, {"category": "x"})

def test_update_cannot_break_answer_index(service, question_store):
    seed(question_store, [stored_question(1)])
    with pytest.raises(ValidationError):
        service.update_question(1, {"answerIndex": 5})
    assert service.get_question(1)["answerIndex"] == 0

def test_delete_missing_leaves_store_unchanged(service, question_store):
    seed(question_store, [stored_question(1), stored_question(2)])
    before = service.list_questions()
    with pytest.raises(NotFoundError):
        service.delete_question(3)
    assert service.list_questions() == before

def test_delete(service, question_store):
    seed(question_store, [stored_question(1), stored_question(2)])
    service.delete_question(1)
    assert [q["id"] for q in service.list_questions()] == [2]

def test_list_by_category_is_case_insensitive_and_localized(service, question_store):
    seed(question_store, [stored_question(1, "Math"), stored_question(2, "science"), stored_question(3, "MATH")])
    view = service.list_by_category("math", "en")
    assert [q["id"] for q in view] == [1, 3]
    assert view[0]["question"] == "Q1"

def test_sample_with_large_count_returns_whole_pool(service, question_store):
    seed(question_store, [stored_question(i) for i in range(1, 6)])
    picked = service.random_sample(50, "en")
    assert sorted(q["id"] for q in picked) == [1, 2, 3, 4, 5]

def test_sample_default_size_is_10(service, question_store):
    seed(question_store, [stored_question(i) for i in range(1, 16)])
    picked = service.random_sample(None, "zh")
    assert len(picked) == 10
    assert len({q["id"] for q in picked}) == 10
    assert all(1 <= q["id"] <= 15 for q in picked)

def test_sample_respects_category(service, question_store):
    seed(question_store, [stored_question(i, "math" if i % 2 else "science") for i in range(1, 11)])
    picked = service.random_sample(3, "en", category="SCIENCE")
    assert len(picked) == 3
    assert all(q["id"] % 2 == 0 and q["category"] == "science" for q in picked)

def test_sample_defaults_to_zh(service, question_store):
    seed(question_store, [stored_question(1)])
    assert service.random_sample(1)[0]["question"] == "問1"

def test_sample_questions_is_a_permutation_when_count_exceeds_pool():
    pool = [{"id": i} for i in range(20)]
    picked = sample_questions(pool, 100, random.Random(7))
    assert sorted(p["id"] for p in picked) == list(range(20))

def test_sample_questions_handles_empty_pool():
    assert sample_questions([], 10) == []
