import logging
from pymongo import DESCENDING, ReturnDocument

from services.schemas import AttemptStatus, Question, Quiz, QuizSummary
from utils.errors import NotFoundError
from utils.helper import parse_object_id, utcnow
from utils.mongodb import QUIZ_COLLECTION

logger = logging.getLogger(__name__)


class QuizStore:
    def __init__(self, db, clock=utcnow):
        self.collection = db[QUIZ_COLLECTION]
        self.clock = clock

    async def ensure_indexes(self):
        await self.collection.create_index("email")

    async def create(self, email: str, topic: str, difficulty: str, questions: list[Question]) -> Quiz:
        now = self.clock()
        doc = {
            "email": email,
            "topic": topic,
            "difficulty": difficulty,
            "questions": [q.model_dump() for q in questions],
            "selected_answers": {},
            "score": 0,
            "attempt_status": AttemptStatus.UNATTEMPTED.value,
            "created_at": now,
            "updated_at": now,
        }
        inserted = await self.collection.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        logger.info(f"Saved quiz {inserted.inserted_id} with {len(questions)} questions for {email}")
        return Quiz.model_validate(doc)

    async def get(self, quiz_id: str) -> Quiz:
        oid = parse_object_id(quiz_id)
        doc = await self.collection.find_one({"_id": oid}) if oid else None
        if not doc:
            raise NotFoundError("Quiz not found")
        return Quiz.model_validate(doc)

    async def record_attempt(self, quiz_id: str, selected_answers: dict, score: float) -> Quiz:
        # Overwrites any earlier attempt; concurrent submits are last-write-wins.
        oid = parse_object_id(quiz_id)
        doc = None
        if oid:
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {
                    "selected_answers": selected_answers,
                    "score": score,
                    "attempt_status": AttemptStatus.ATTEMPTED.value,
                    "updated_at": self.clock(),
                }},
                return_document=ReturnDocument.AFTER,
            )
        if not doc:
            raise NotFoundError("Quiz not found")
        return Quiz.model_validate(doc)

    async def list_by_owner(self, email: str) -> list[QuizSummary]:
        cursor = self.collection.find({"email": email}).sort("created_at", DESCENDING)
        docs = await cursor.to_list(length=None)
        return [QuizSummary.from_quiz(Quiz.model_validate(doc)) for doc in docs]
