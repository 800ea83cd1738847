"""
Storage interface shared by the flat-file and database backends.

Records cross this boundary as plain dicts in their JSON wire shape
(``answerIndex``, ``userId``, ``correctRate`` ...), so the services work the
same way over either backend.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]

class QuestionStore(ABC):

    @abstractmethod
    def list_all(self) -> List[Record]:
        """All questions in ascending id order."""

    @abstractmethod
    def get(self, question_id: int) -> Optional[Record]: ...

    @abstractmethod
    def filter_by_category(self, category: str) -> List[Record]:
        """Questions whose category matches case-insensitively."""

    @abstractmethod
    def insert(self, record: Record) -> Record:
        """Store a new question under a store-assigned id and return it."""

    @abstractmethod
    def update(self, question_id: int, fields: Record) -> Optional[Record]:
        """Merge fields onto an existing question; None if the id is unknown."""

    @abstractmethod
    def delete(self, question_id: int) -> bool: ...

class QuizResultStore(ABC):

    @abstractmethod
    def list_all(self) -> List[Record]:
        """All results, newest first."""

    @abstractmethod
    def insert(self, record: Record) -> Record: ...

    @abstractmethod
    def find_perfect(self, field: str, value: Any, category: Optional[str]) -> Optional[Record]:
        """
        First record with ``record[field] == value``, ``correctRate == 100`` and
        exactly the given category (None only matches records without one).
        """

    @abstractmethod
    def delete_all(self) -> int: ...

    @abstractmethod
    def delete_by_user(self, user_id: str) -> int: ...

    @abstractmethod
    def delete_by_timestamp(self, timestamp: str) -> int: ...
