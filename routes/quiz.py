import logging
from fastapi import APIRouter, Depends, File, Form, UploadFile

from services.extractor import extract_upload
from services.quiz import FALLBACK_TITLE, MAX_SOURCE_CHARS, generate_questions, generate_quiz_title
from services.schemas import GeneratedQuiz, SubmitRequest, SubmitResponse
from utils.context import AppContext, get_context
from utils.errors import UpstreamError, ValidationError
from utils.helper import coerce_score

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["Quiz"])


@router.post("/generate", response_model=GeneratedQuiz)
async def generate_quiz(
    file: UploadFile | None = File(None),
    topic: str | None = Form(None),
    email: str | None = Form(None),
    difficulty: str = Form("Medium"),
    ctx: AppContext = Depends(get_context),
):
    source = (topic or "").strip()
    if not source and file is None:
        raise ValidationError("Please provide a topic or upload a file.")

    if file is not None:
        text = await extract_upload(file, ctx.settings.upload_dir)
        source = text[:MAX_SOURCE_CHARS]

    # the title is cosmetic, so a failed call must not sink the request
    title = FALLBACK_TITLE
    try:
        title = await generate_quiz_title(ctx.completion, source, timeout=ctx.settings.title_timeout)
    except UpstreamError as e:
        logger.warning(f"Failed to generate title, using fallback: {e.details}")

    questions = await generate_questions(ctx.completion, source, difficulty, timeout=ctx.settings.quiz_timeout)

    quiz = await ctx.quiz_store.create(
        email=email or "anonymous",
        topic=title,
        difficulty=difficulty,
        questions=questions,
    )
    return GeneratedQuiz(quiz_id=quiz.id, topic=title, difficulty=difficulty, questions=quiz.questions)


@router.post("/submit", response_model=SubmitResponse)
async def submit_quiz(body: SubmitRequest, ctx: AppContext = Depends(get_context)):
    if not body.quiz_id or body.selected_answers is None:
        raise ValidationError("Missing required fields")

    quiz = await ctx.quiz_store.record_attempt(
        body.quiz_id,
        body.selected_answers,
        coerce_score(body.score),
    )
    return SubmitResponse(message="Quiz attempt updated successfully", quiz=quiz)
