"""
SQLAlchemy backend: questions and quiz results as two tables.

Each store opens a short-lived session per operation, so every mutation is a
single transaction.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from quizbank.core.exceptions import DuplicateError, StorageError
from quizbank.models.orm import Question, QuizResult
from quizbank.storage.base import QuestionStore, QuizResultStore, Record
from quizbank.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

_RESULT_COLUMNS = {
    "userId": QuizResult.user_id,
    "ip": QuizResult.ip,
}

_QUESTION_FIELDS = {
    "question": "question",
    "options": "options",
    "answerIndex": "answer_index",
    "category": "category",
}

def is_unique_violation(error: IntegrityError) -> bool:
    # 23505 is PostgreSQL's unique_violation; SQLite only reports it in the message
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message

def sync_id_sequence(db: Session, table: str, column: str = "id") -> bool:
    """
    Move a PostgreSQL serial sequence past explicitly inserted ids so the next
    auto-assigned id is max + 1 (or 1 for an empty table). Other dialects derive
    the next id from the table itself.
    """
    if db.get_bind().dialect.name != "postgresql":
        return False
    db.execute(text(
        f"SELECT setval(pg_get_serial_sequence('{table}', '{column}'), "
        f"COALESCE(MAX({column}), 1), MAX({column}) IS NOT NULL) FROM {table}"
    ))
    return True

class _SqlStore:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"{operation} rejected by the database: {e.orig}")
            if is_unique_violation(e):
                raise DuplicateError("Record with this id already exists") from e
            raise StorageError(f"Constraint violated during {operation}") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{operation} failed: {e}")
            raise StorageError(f"Database error during {operation}") from e
        finally:
            db.close()

class SqlQuestionStore(_SqlStore, QuestionStore):

    def list_all(self) -> List[Record]:
        with self._session("list questions") as db:
            rows = db.scalars(select(Question).order_by(Question.id)).all()
            return [q.to_dict() for q in rows]

    def get(self, question_id: int) -> Optional[Record]:
        with self._session("get question") as db:
            q = db.get(Question, question_id)
            return q.to_dict() if q else None

    def filter_by_category(self, category: str) -> List[Record]:
        with self._session("filter questions") as db:
            stmt = select(Question).where(func.lower(Question.category) == category.lower()).order_by(Question.id)
            return [q.to_dict() for q in db.scalars(stmt).all()]

    def insert(self, record: Record) -> Record:
        with self._session("insert question") as db:
            q = Question.from_dict({k: v for k, v in record.items() if k != "id"})
            db.add(q); db.flush()
            return q.to_dict()

    def update(self, question_id: int, fields: Record) -> Optional[Record]:
        with self._session("update question") as db:
            q = db.get(Question, question_id)
            if not q:
                return None
            for key, value in fields.items():
                if key in _QUESTION_FIELDS:
                    setattr(q, _QUESTION_FIELDS[key], value)
            db.flush()
            return q.to_dict()

    def delete(self, question_id: int) -> bool:
        with self._session("delete question") as db:
            result = db.execute(delete(Question).where(Question.id == question_id))
            return result.rowcount > 0

    def replace_all(self, records: List[Record]) -> int:
        """Drop every question and insert the given ones, keeping their ids."""
        with self._session("import questions") as db:
            db.execute(delete(Question))
            db.add_all([Question.from_dict(r) for r in records])
            db.flush()
            sync_id_sequence(db, Question.__tablename__)
        return len(records)

class SqlQuizResultStore(_SqlStore, QuizResultStore):

    def list_all(self) -> List[Record]:
        with self._session("list quiz results") as db:
            stmt = select(QuizResult).order_by(QuizResult.timestamp.desc(), QuizResult.id.desc())
            return [r.to_dict() for r in db.scalars(stmt).all()]

    def insert(self, record: Record) -> Record:
        with self._session("insert quiz result") as db:
            r = QuizResult.from_dict(record)
            db.add(r); db.flush()
            return r.to_dict()

    def find_perfect(self, field: str, value: Any, category: Optional[str]) -> Optional[Record]:
        column = _RESULT_COLUMNS[field]
        category_clause = QuizResult.category.is_(None) if category is None else QuizResult.category == category
        stmt = (
            select(QuizResult)
            .where(column == value, QuizResult.correct_rate == 100, category_clause)
            .order_by(QuizResult.id)
            .limit(1)
        )
        with self._session("check quiz status") as db:
            r = db.scalar(stmt)
            return r.to_dict() if r else None

    def delete_all(self) -> int:
        with self._session("delete all quiz results") as db:
            return db.execute(delete(QuizResult)).rowcount

    def delete_by_user(self, user_id: str) -> int:
        with self._session("delete quiz results by user") as db:
            return db.execute(delete(QuizResult).where(QuizResult.user_id == user_id)).rowcount

    def delete_by_timestamp(self, timestamp: str) -> int:
        ts = parse_timestamp(timestamp)
        if ts is None:
            return 0
        with self._session("delete quiz result by timestamp") as db:
            return db.execute(delete(QuizResult).where(QuizResult.timestamp == ts)).rowcount

    def replace_all(self, records: List[Record]) -> int:
        with self._session("import quiz results") as db:
            db.execute(delete(QuizResult))
            db.add_all([QuizResult.from_dict(r) for r in records])
        return len(records)
