"""
Localization projection: flatten a multi-language question into one language.
"""
from typing import Any, Dict, Iterable, List, Mapping

FALLBACK_LANG = "zh"
QUESTION_NOT_AVAILABLE = "Question not available"
INVALID_QUESTION = "Invalid Question"

def _missing(value: Any) -> bool:
    # Containers count as present even when empty; other falsy values do not
    if isinstance(value, (Mapping, list)):
        return False
    return not value

def _pick(translations: Any, lang: str, default: Any) -> Any:
    if not isinstance(translations, Mapping):
        return default
    for key in (lang, FALLBACK_LANG):
        value = translations.get(key)
        if not _missing(value):
            return value
    return default

def localize_question(question: Mapping[str, Any], lang: str) -> Dict[str, Any]:
    """
    Resolve question text and options for ``lang``, falling back to ``zh`` and
    then to a placeholder. Records without question or options degrade to an
    "Invalid Question" entry instead of failing.
    """
    if _missing(question.get("question")) or _missing(question.get("options")):
        return {**question, "question": INVALID_QUESTION, "options": []}

    return {
        "id": question.get("id"),
        "question": _pick(question["question"], lang, QUESTION_NOT_AVAILABLE),
        "options": _pick(question["options"], lang, []),
        "answerIndex": question.get("answerIndex"),
        "category": question.get("category"),
    }

def localize_questions(questions: Iterable[Mapping[str, Any]], lang: str) -> List[Dict[str, Any]]:
    return [localize_question(q, lang) for q in questions]
