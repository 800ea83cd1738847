import json

import pytest
from fastapi.testclient import TestClient

from quizbank.core.config import Settings
from quizbank.core.database import create_db_engine, make_session_factory, init_db, close_db
from quizbank.main import create_app
from quizbank.storage.database import SqlQuestionStore, SqlQuizResultStore
from quizbank.storage.json_file import JsonQuestionStore, JsonQuizResultStore

def make_settings(tmp_path, backend="file", **overrides) -> Settings:
    values = dict(
        STORAGE_BACKEND=backend,
        QUESTIONS_FILE=str(tmp_path / "questions.json"),
        QUIZ_RESULTS_FILE=str(tmp_path / "quiz_results.json"),
        DATABASE_URL=f"sqlite:///{tmp_path / 'quizbank.db'}",
        PROMETHEUS_ENABLED=False,
        STATIC_DIR=None,
    )
    values.update(overrides)
    return Settings(**values)

def question_payload(zh="問題", en="Q", options=None, answer_index=0, category=None):
    payload = {
        "question": {"zh": zh, "en": en},
        "options": options or {"zh": ["A", "B"], "en": ["A", "B"]},
        "answerIndex": answer_index,
    }
    if category is not None:
        payload["category"] = category
    return payload

def result_payload(user_id="u1", correct_rate=100, category=None, **extra):
    payload = {
        "userId": user_id,
        "userName": extra.pop("userName", "Alice"),
        "score": extra.pop("score", 5),
        "total": extra.pop("total", 5),
        "correctRate": correct_rate,
        "answers": extra.pop("answers", [0, 1, 2, 3, 0]),
        "lang": extra.pop("lang", "en"),
    }
    if category is not None:
        payload["category"] = category
    payload.update(extra)
    return payload

def write_json(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

@pytest.fixture(params=["file", "database"])
def backend(request):
    return request.param

@pytest.fixture
def settings(tmp_path, backend):
    return make_settings(tmp_path, backend)

@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c

@pytest.fixture
def json_question_store(tmp_path):
    return JsonQuestionStore(str(tmp_path / "questions.json"))

@pytest.fixture
def json_result_store(tmp_path):
    return JsonQuizResultStore(str(tmp_path / "quiz_results.json"))

@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'stores.db'}")
    init_db(engine)
    yield make_session_factory(engine)
    close_db(engine)

@pytest.fixture
def question_store(backend, tmp_path, session_factory):
    if backend == "database":
        return SqlQuestionStore(session_factory)
    return JsonQuestionStore(str(tmp_path / "questions.json"))

@pytest.fixture
def result_store(backend, tmp_path, session_factory):
    if backend == "database":
        return SqlQuizResultStore(session_factory)
    return JsonQuizResultStore(str(tmp_path / "quiz_results.json"))
