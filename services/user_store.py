import logging
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from services.schemas import User
from utils.errors import ConflictError, NotFoundError
from utils.mongodb import USER_COLLECTION

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, db):
        self.collection = db[USER_COLLECTION]

    async def ensure_indexes(self):
        await self.collection.create_index("email", unique=True)

    async def create(self, name: str | None, email: str, role: str | None) -> User:
        if await self.collection.find_one({"email": email}):
            raise ConflictError("User already exists")

        doc = {"name": name, "email": email, "role": role}
        try:
            inserted = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            # registered by a concurrent request after the check above
            raise ConflictError("User already exists")
        doc["_id"] = inserted.inserted_id
        logger.info(f"Registered user {email}")
        return User.model_validate(doc)

    async def get_by_email(self, email: str) -> User:
        doc = await self.collection.find_one({"email": email})
        if not doc:
            raise NotFoundError("User not found")
        return User.model_validate(doc)

    async def update_by_email(self, email: str, name: str | None = None, role: str | None = None) -> User:
        """Update name and/or role; fields left as None are not touched."""
        changes = {k: v for k, v in {"name": name, "role": role}.items() if v is not None}
        if not changes:
            return await self.get_by_email(email)

        doc = await self.collection.find_one_and_update(
            {"email": email},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError("User not found")
        return User.model_validate(doc)
