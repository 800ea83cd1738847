from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from quizbank.api.deps import get_question_service
from quizbank.services.questions import QuestionService

router = APIRouter()

class QuestionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    question: Dict[str, str]
    options: Dict[str, List[str]]
    answer_index: int = Field(alias="answerIndex")
    category: Optional[str] = None

class QuestionUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    question: Optional[Dict[str, str]] = None
    options: Optional[Dict[str, List[str]]] = None
    answer_index: Optional[int] = Field(None, alias="answerIndex")
    category: Optional[str] = None

@router.get("")
def list_questions(svc: QuestionService = Depends(get_question_service)):
    return svc.list_questions()

@router.get("/random")
def random_questions(count: Optional[int] = Query(None, ge=0), lang: Optional[str] = None,
                     svc: QuestionService = Depends(get_question_service)):
    return svc.random_sample(count, lang)

@router.get("/category/{category}")
def questions_by_category(category: str, lang: Optional[str] = None,
                          svc: QuestionService = Depends(get_question_service)):
    return svc.list_by_category(category, lang)

@router.get("/category/{category}/random")
def random_questions_by_category(category: str, count: Optional[int] = Query(None, ge=0), lang: Optional[str] = None,
                                 svc: QuestionService = Depends(get_question_service)):
    return svc.random_sample(count, lang, category=category)

@router.get("/{question_id}")
def get_question(question_id: int, svc: QuestionService = Depends(get_question_service)):
    return svc.get_question(question_id)

@router.post("", status_code=status.HTTP_201_CREATED)
def create_question(payload: QuestionCreate, svc: QuestionService = Depends(get_question_service)):
    return svc.create_question(payload.model_dump(by_alias=True))

@router.put("/{question_id}")
def update_question(question_id: int, payload: QuestionUpdate, svc: QuestionService = Depends(get_question_service)):
    return svc.update_question(question_id, payload.model_dump(by_alias=True, exclude_unset=True))

@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(question_id: int, svc: QuestionService = Depends(get_question_service)):
    svc.delete_question(question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
