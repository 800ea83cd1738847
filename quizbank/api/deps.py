from fastapi import Request

from quizbank.services.questions import QuestionService
from quizbank.services.quiz_results import QuizResultService

def get_question_service(request: Request) -> QuestionService:
    return request.app.state.question_service

def get_quiz_result_service(request: Request) -> QuizResultService:
    return request.app.state.quiz_result_service
