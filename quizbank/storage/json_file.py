"""
Flat-file backend: each collection is one pretty-printed JSON document holding
a top-level list of records.

Every read loads the whole file and every write rewrites it. Read-modify-write
sequences on one store instance run under a lock so id assignment and deletes
do not interleave within the process.
"""
import json
import logging
import os
import tempfile
import threading
from typing import Any, List, Optional

from quizbank.core.exceptions import StorageError
from quizbank.storage.base import QuestionStore, QuizResultStore, Record

logger = logging.getLogger(__name__)

def _read_json(path: str, default: Any = None) -> Any:
    if default is None:
        default = []
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        return json.loads(content) if content.strip() else default
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read JSON file {path}: {e}")
        raise StorageError(f"Could not read file: {os.path.basename(path)}") from e

def _write_json(path: str, data: Any) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to write JSON file {path}: {e}")
        raise StorageError(f"Could not write to file: {os.path.basename(path)}") from e

class _JsonDocument:

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.RLock()

    def load(self) -> List[Record]:
        data = _read_json(self.path, [])
        if not isinstance(data, list):
            raise StorageError(f"Expected a list in {os.path.basename(self.path)}")
        return data

    def save(self, records: List[Record]) -> None:
        _write_json(self.path, records)

class JsonQuestionStore(_JsonDocument, QuestionStore):

    def list_all(self) -> List[Record]:
        questions = self.load()
        return sorted(questions, key=lambda q: q.get("id") if isinstance(q.get("id"), int) else 0)

    def get(self, question_id: int) -> Optional[Record]:
        return next((q for q in self.load() if q.get("id") == question_id), None)

    def filter_by_category(self, category: str) -> List[Record]:
        wanted = category.lower()
        return [
            q for q in self.list_all()
            if isinstance(q.get("category"), str) and q["category"].lower() == wanted
        ]

    def insert(self, record: Record) -> Record:
        with self._lock:
            questions = self.load()
            max_id = max((q["id"] for q in questions if isinstance(q.get("id"), int)), default=0)
            new_question = dict(record, id=max_id + 1)
            questions.append(new_question)
            self.save(questions)
        return new_question

    def update(self, question_id: int, fields: Record) -> Optional[Record]:
        with self._lock:
            questions = self.load()
            for i, q in enumerate(questions):
                if q.get("id") == question_id:
                    updated = {**q, **fields, "id": question_id}
                    questions[i] = updated
                    self.save(questions)
                    return updated
        return None

    def delete(self, question_id: int) -> bool:
        with self._lock:
            questions = self.load()
            remaining = [q for q in questions if q.get("id") != question_id]
            if len(remaining) == len(questions):
                return False
            self.save(remaining)
        return True

class JsonQuizResultStore(_JsonDocument, QuizResultStore):

    def list_all(self) -> List[Record]:
        results = self.load()
        return sorted(results, key=lambda r: str(r.get("timestamp") or ""), reverse=True)

    def insert(self, record: Record) -> Record:
        with self._lock:
            results = self.load()
            results.append(record)
            self.save(results)
        return record

    def find_perfect(self, field: str, value: Any, category: Optional[str]) -> Optional[Record]:
        for r in self.load():
            if r.get(field) == value and r.get("correctRate") == 100 and r.get("category") == category:
                return r
        return None

    def delete_all(self) -> int:
        with self._lock:
            count = len(self.load())
            self.save([])
        return count

    def _delete_where(self, field: str, value: Any) -> int:
        with self._lock:
            results = self.load()
            remaining = [r for r in results if r.get(field) != value]
            removed = len(results) - len(remaining)
            if removed:
                self.save(remaining)
        return removed

    def delete_by_user(self, user_id: str) -> int:
        return self._delete_where("userId", user_id)

    def delete_by_timestamp(self, timestamp: str) -> int:
        return self._delete_where("timestamp", timestamp)
