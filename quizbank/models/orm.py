from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime, JSON, Index

from quizbank.utils.timestamps import format_timestamp, parse_timestamp, utc_now

class Base(DeclarativeBase): pass

class Question(Base):
    __tablename__ = "questions"
    # Integer (not BigInteger) so SQLite treats it as the auto-increment rowid
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question: Mapped[dict] = mapped_column(JSON)
    options: Mapped[dict] = mapped_column(JSON)
    answer_index: Mapped[int] = mapped_column(Integer)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "options": self.options,
            "answerIndex": self.answer_index,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            id=data.get("id"),
            question=data.get("question"),
            options=data.get("options"),
            answer_index=data.get("answerIndex"),
            category=data.get("category"),
        )

class QuizResult(Base):
    __tablename__ = "quiz_results"
    __table_args__ = (
        Index("idx_quiz_results_ip_category", "ip", "category"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    user_name: Mapped[str] = mapped_column(String(255))
    score: Mapped[int] = mapped_column(Integer)
    total: Mapped[int] = mapped_column(Integer)
    correct_rate: Mapped[float] = mapped_column(Float)
    answers: Mapped[list] = mapped_column(JSON, default=list)
    lang: Mapped[str | None] = mapped_column(String(16), nullable=True)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, index=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "score": self.score,
            "total": self.total,
            "correctRate": self.correct_rate,
            "answers": self.answers or [],
            "lang": self.lang,
            "category": self.category,
            "ip": self.ip,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuizResult":
        answers: List[int] = data.get("answers") or []
        ts: Optional[datetime] = parse_timestamp(data.get("timestamp") or "") or utc_now()
        return cls(
            user_id=data.get("userId"),
            user_name=data.get("userName", ""),
            score=data.get("score"),
            total=data.get("total"),
            correct_rate=data.get("correctRate"),
            answers=answers,
            lang=data.get("lang"),
            category=data.get("category"),
            ip=data.get("ip"),
            timestamp=ts,
        )
