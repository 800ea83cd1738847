"""
Question bank operations over a QuestionStore.
"""
import logging
import random
from typing import Any, Dict, List, Mapping, Optional, Sequence

from quizbank.core.exceptions import NotFoundError, ValidationError
from quizbank.services.localization import localize_questions
from quizbank.storage.base import QuestionStore, Record

logger = logging.getLogger(__name__)

DEFAULT_LANG = "zh"
DEFAULT_SAMPLE_SIZE = 10

def sample_questions(pool: Sequence[Record], count: int, rng: Optional[random.Random] = None) -> List[Record]:
    """
    Pick up to ``count`` records uniformly without replacement, in random order.
    A count larger than the pool returns the whole pool shuffled.
    """
    rng = rng or random
    return rng.sample(list(pool), min(max(count, 0), len(pool)))

def validate_question(record: Mapping[str, Any], required_languages: Sequence[str] = ()) -> None:
    question, options = record.get("question"), record.get("options")
    if not isinstance(question, Mapping) or not isinstance(options, Mapping):
        raise ValidationError("question and options must be objects keyed by language")
    answer_index = record.get("answerIndex")
    if answer_index is None:
        raise ValidationError("answerIndex is required")
    if isinstance(answer_index, bool) or not isinstance(answer_index, int):
        raise ValidationError("answerIndex must be an integer")

    missing = [lang for lang in required_languages if lang not in question or lang not in options]
    if missing:
        raise ValidationError(f"Missing translations for: {', '.join(missing)}")
    for lang, choices in options.items():
        if not isinstance(choices, list):
            raise ValidationError(f"options.{lang} must be a list")
        if not 0 <= answer_index < len(choices):
            raise ValidationError(f"answerIndex {answer_index} is out of range for options.{lang}")

class QuestionService:

    def __init__(
        self,
        store: QuestionStore,
        default_lang: str = DEFAULT_LANG,
        default_sample_size: int = DEFAULT_SAMPLE_SIZE,
        required_languages: Sequence[str] = ("zh", "en"),
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.default_lang = default_lang
        self.default_sample_size = default_sample_size
        self.required_languages = tuple(required_languages)
        self.rng = rng

    def list_questions(self) -> List[Record]:
        """Full multi-language records for the admin view."""
        return self.store.list_all()

    def get_question(self, question_id: int) -> Record:
        question = self.store.get(question_id)
        if question is None:
            raise NotFoundError(f"Question {question_id} not found")
        return question

    def list_by_category(self, category: str, lang: Optional[str] = None) -> List[Dict[str, Any]]:
        return localize_questions(self.store.filter_by_category(category), lang or self.default_lang)

    def random_sample(self, count: Optional[int] = None, lang: Optional[str] = None,
                      category: Optional[str] = None) -> List[Dict[str, Any]]:
        pool = self.store.filter_by_category(category) if category is not None else self.store.list_all()
        picked = sample_questions(pool, count or self.default_sample_size, self.rng)
        return localize_questions(picked, lang or self.default_lang)

    def create_question(self, payload: Mapping[str, Any]) -> Record:
        record = {k: v for k, v in payload.items() if k != "id"}
        validate_question(record, self.required_languages)
        created = self.store.insert(record)
        logger.info(f"Created question {created['id']}")
        return created

    def update_question(self, question_id: int, fields: Mapping[str, Any]) -> Record:
        existing = self.get_question(question_id)
        changes = {k: v for k, v in fields.items() if k != "id"}
        validate_question({**existing, **changes}, self.required_languages)
        updated = self.store.update(question_id, changes)
        if updated is None:
            raise NotFoundError(f"Question {question_id} not found")
        logger.info(f"Updated question {question_id}")
        return updated

    def delete_question(self, question_id: int) -> None:
        if not self.store.delete(question_id):
            raise NotFoundError(f"Question {question_id} not found")
        logger.info(f"Deleted question {question_id}")
