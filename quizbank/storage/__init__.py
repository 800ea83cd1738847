from quizbank.storage.base import QuestionStore, QuizResultStore, Record

__all__ = ["QuestionStore", "QuizResultStore", "Record"]
