from motor.motor_asyncio import AsyncIOMotorClient

from utils.config import Settings


QUIZ_COLLECTION = "quizzes"
USER_COLLECTION = "users"


def connect(settings: Settings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.mongo_uri, tz_aware=True)


def get_database(client, settings: Settings):
    return client[settings.mongo_db_name]
