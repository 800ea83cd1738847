"""
Quiz attempt records: recording, completion gating and administration.

A category counts as completed once a record with a perfect score
(``correctRate == 100``) exists for the same caller and exactly the same
category. A missing category only matches records that have none.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from quizbank.core.exceptions import NotFoundError, ValidationError
from quizbank.storage.base import QuizResultStore, Record
from quizbank.utils.net import normalize_ip
from quizbank.utils.timestamps import new_timestamp

logger = logging.getLogger(__name__)

DEFAULT_LANG = "zh"

class QuizResultService:

    def __init__(self, store: QuizResultStore, default_lang: str = DEFAULT_LANG):
        self.store = store
        self.default_lang = default_lang

    def record_result(self, payload: Mapping[str, Any], client_ip: Optional[str]) -> Record:
        """Stamp the attempt with the caller's address and the server time, then store it."""
        record = dict(payload)
        record["ip"] = normalize_ip(client_ip)
        record["timestamp"] = new_timestamp()
        saved = self.store.insert(record)
        logger.info(f"Recorded quiz result for user {saved.get('userId')} (category={saved.get('category')})")
        return saved

    def list_results(self) -> List[Record]:
        return self.store.list_all()

    def _status(self, record: Optional[Record], message: str) -> Dict[str, Any]:
        if record is None:
            return {"canTakeQuiz": True}
        return {
            "canTakeQuiz": False,
            "lang": record.get("lang") or self.default_lang,
            "userName": record.get("userName") or "",
            "message": message,
        }

    def check_status_by_ip(self, ip: Optional[str], category: Optional[str] = None) -> Dict[str, Any]:
        record = self.store.find_perfect("ip", normalize_ip(ip), category)
        return self._status(record, "This IP address has already achieved a perfect score for this category.")

    def check_status_by_user(self, user_id: Optional[str], category: Optional[str] = None) -> Dict[str, Any]:
        if not user_id or not user_id.strip():
            raise ValidationError("A user id is required")
        record = self.store.find_perfect("userId", user_id, category)
        return self._status(record, "User has already achieved a perfect score for this category.")

    def delete_all(self) -> int:
        removed = self.store.delete_all()
        logger.info(f"Deleted all quiz results ({removed} records)")
        return removed

    def delete_by_user(self, user_id: str) -> int:
        removed = self.store.delete_by_user(user_id)
        if not removed:
            raise NotFoundError(f"No quiz results found for user {user_id}")
        logger.info(f"Deleted {removed} quiz results for user {user_id}")
        return removed

    def delete_by_timestamp(self, timestamp: str) -> int:
        removed = self.store.delete_by_timestamp(timestamp)
        if not removed:
            raise NotFoundError("Quiz result not found")
        logger.info(f"Deleted quiz result at {timestamp}")
        return removed
