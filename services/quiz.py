import json
import logging
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from services.schemas import Question
from utils.errors import InvalidQuizFormatError

logger = logging.getLogger(__name__)

MAX_SOURCE_CHARS = 4000
NUM_QUESTIONS = 10
FALLBACK_TITLE = "Generated Quiz"

TITLE_SYSTEM_PROMPT = "You generate short quiz titles only."
TITLE_PROMPT = """Summarize the following text into a concise, 3–5 word quiz topic/title. No formatting.
\"\"\"{content}\"\"\""""

QUIZ_SYSTEM_PROMPT = "You are a helpful quiz generator that returns valid JSON."
QUIZ_PROMPT = """Generate exactly {num_questions} multiple-choice questions in JSON format.
Each object should include:
- question
- options (4)
- answer (correct index 0–3)
- explanation (2 lines)

Difficulty: "{difficulty}".
Based on this content:
\"\"\"{content}\"\"\"
Return only the JSON array."""

_questions_adapter = TypeAdapter(list[Question])


async def generate_quiz_title(client, text: str, timeout: float) -> str:
    prompt = TITLE_PROMPT.format(content=text[:MAX_SOURCE_CHARS])
    res = await client.complete(
        [
            {"role": "system", "content": TITLE_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=0.3,
        timeout=timeout,
    )
    title = " ".join(res.split())
    return title or FALLBACK_TITLE


async def generate_questions(client, text: str, difficulty: str, timeout: float) -> list[Question]:
    """
    Ask the completion API for a quiz on `text` and parse the answer.

    Raises InvalidQuizFormatError (with the raw model output attached) when the
    response holds no usable question list, and UpstreamError when the API
    call itself fails.
    """
    prompt = QUIZ_PROMPT.format(
        num_questions=NUM_QUESTIONS,
        difficulty=difficulty,
        content=text[:MAX_SOURCE_CHARS],
    )
    content = await client.complete(
        [
            {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=0.7,
        timeout=timeout,
    )
    return validate_questions(parse_questions(content), content)


def extract_json_array(text: str):
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end == -1:
        raise ValueError("No JSON array found")
    return json.loads(text[start:end + 1])


def parse_questions(content: str) -> list:
    try:
        questions = extract_json_array(content)
    except ValueError:
        try:
            questions = json.loads(content)
        except ValueError:
            logger.error("Model output is not valid JSON")
            raise InvalidQuizFormatError(raw=content)

    if not isinstance(questions, list) or not questions:
        logger.error("Model output is not a non-empty JSON array")
        raise InvalidQuizFormatError(raw=content)
    return questions


def validate_questions(questions: list, raw: str) -> list[Question]:
    try:
        return _questions_adapter.validate_python(questions)
    except PydanticValidationError as e:
        logger.error(f"Model returned {len(questions)} questions that do not match the schema")
        raise InvalidQuizFormatError(details=str(e), raw=raw)
