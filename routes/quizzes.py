from fastapi import APIRouter, Depends

from services.schemas import QuizSummary
from utils.context import AppContext, get_context

router = APIRouter(prefix="/api/quizzes", tags=["Quizzes"])


@router.get("/{email}", response_model=list[QuizSummary])
async def list_quizzes(email: str, ctx: AppContext = Depends(get_context)):
    """All quizzes created by `email`, newest first."""
    return await ctx.quiz_store.list_by_owner(email)
