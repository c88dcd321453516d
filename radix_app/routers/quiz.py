"""API routes for the conversion quiz."""

from fastapi import APIRouter, Depends, Query

from radix_app.dependencies import get_quiz_service
from radix_app.models.quiz import QuizGradeRequest, QuizQuestion, QuizResult
from radix_app.services.quiz_service import QuizService

router = APIRouter(prefix="/api/v1/quiz", tags=["quiz"])


@router.get("", response_model=list[QuizQuestion])
async def get_quiz(
    count: int | None = Query(None, ge=1, le=50, description="Number of questions"),
    quiz_service: QuizService = Depends(get_quiz_service),
) -> list[QuizQuestion]:
    """Generate random integer conversion questions."""
    return quiz_service.generate_quiz(count)


@router.post("/grade", response_model=QuizResult)
async def grade_quiz(
    grade_request: QuizGradeRequest,
    quiz_service: QuizService = Depends(get_quiz_service),
) -> QuizResult:
    """Grade answers to quiz questions."""
    return quiz_service.grade_quiz(grade_request.answers)
