from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional

from quizbank.api.deps import get_quiz_result_service
from quizbank.services.quiz_results import QuizResultService

router = APIRouter()

class QuizResultCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    user_id: str = Field(alias="userId", min_length=1)
    user_name: str = Field("", alias="userName")
    score: int = Field(ge=0)
    total: int = Field(ge=0)
    correct_rate: float = Field(alias="correctRate", ge=0, le=100)
    answers: List[int] = Field(default_factory=list)
    lang: Optional[str] = None
    category: Optional[str] = None

    @model_validator(mode="after")
    def check_score(self):
        if self.score > self.total:
            raise ValueError("score cannot exceed total")
        return self

class QuizStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    can_take_quiz: bool = Field(alias="canTakeQuiz")
    lang: Optional[str] = None
    user_name: Optional[str] = Field(None, alias="userName")
    message: Optional[str] = None

class Message(BaseModel):
    message: str

def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None

@router.post("", status_code=status.HTTP_201_CREATED)
def record_result(payload: QuizResultCreate, request: Request,
                  svc: QuizResultService = Depends(get_quiz_result_service)):
    return svc.record_result(payload.model_dump(by_alias=True), client_ip(request))

@router.get("")
def list_results(svc: QuizResultService = Depends(get_quiz_result_service)):
    return svc.list_results()

@router.get("/status/ip", response_model=QuizStatus, response_model_exclude_none=True)
def status_by_ip(request: Request, category: Optional[str] = None,
                 svc: QuizResultService = Depends(get_quiz_result_service)):
    return svc.check_status_by_ip(client_ip(request), category)

@router.get("/status/{user_id}", response_model=QuizStatus, response_model_exclude_none=True)
def status_by_user(user_id: str, category: Optional[str] = None,
                   svc: QuizResultService = Depends(get_quiz_result_service)):
    return svc.check_status_by_user(user_id, category)

@router.delete("", response_model=Message)
def delete_all_results(svc: QuizResultService = Depends(get_quiz_result_service)):
    removed = svc.delete_all()
    return {"message": f"All quiz results deleted ({removed} records)"}

@router.delete("/user/{user_id}", response_model=Message)
def delete_user_results(user_id: str, svc: QuizResultService = Depends(get_quiz_result_service)):
    removed = svc.delete_by_user(user_id)
    return {"message": f"Deleted {removed} quiz results for user {user_id}"}

@router.delete("/{timestamp}", response_model=Message)
def delete_result(timestamp: str, svc: QuizResultService = Depends(get_quiz_result_service)):
    svc.delete_by_timestamp(timestamp)
    return {"message": "Quiz result deleted"}
