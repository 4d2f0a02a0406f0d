import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request

from services.completion import CompletionClient
from services.quiz_store import QuizStore
from services.user_store import UserStore
from utils import mongodb
from utils.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request handler needs, built once per process."""
    settings: Settings
    quiz_store: QuizStore
    user_store: UserStore
    completion: Any
    mongo_client: Any = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        client = mongodb.connect(settings)
        db = mongodb.get_database(client, settings)
        return cls(
            settings=settings,
            quiz_store=QuizStore(db),
            user_store=UserStore(db),
            completion=CompletionClient(settings),
            mongo_client=client,
        )

    async def init(self):
        await self.quiz_store.ensure_indexes()
        await self.user_store.ensure_indexes()
        logger.info(f"Connected to database '{self.settings.mongo_db_name}'")

    async def close(self):
        if hasattr(self.completion, "close"):
            await self.completion.close()
        if self.mongo_client is not None:
            self.mongo_client.close()
        logger.info("Application context closed")


def get_context(request: Request) -> AppContext:
    return request.app.state.context
