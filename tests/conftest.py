import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from main import create_app
from services.quiz_store import QuizStore
from services.user_store import UserStore
from utils.config import Settings
from utils.context import AppContext


def make_questions(n=10):
    return [
        {
            "question": f"Question {i}?",
            "options": ["A", "B", "C", "D"],
            "answer": i % 4,
            "explanation": f"Because {i}.",
        }
        for i in range(n)
    ]


def quiz_json(n=10):
    return json.dumps(make_questions(n))


class FakeCompletionClient:
    """Plays back queued responses; an Exception in the queue is raised instead."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def complete(self, messages, temperature, timeout):
        self.calls.append({"messages": messages, "temperature": temperature, "timeout": timeout})
        res = self.responses.pop(0)
        if isinstance(res, Exception):
            raise res
        return res


class TickingClock:
    def __init__(self):
        self.now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def settings(tmp_path):
    return Settings(upload_dir=str(tmp_path / "uploads"), cors_origins=["*"])


@pytest.fixture
def db():
    return AsyncMongoMockClient()["intelliq_test"]


@pytest.fixture
def completion():
    return FakeCompletionClient()


@pytest.fixture
def context(settings, db, completion):
    return AppContext(
        settings=settings,
        quiz_store=QuizStore(db, clock=TickingClock()),
        user_store=UserStore(db),
        completion=completion,
    )


@pytest.fixture
def client(context):
    with TestClient(create_app(context=context)) as c:
        yield c


@pytest.fixture
def count_docs(db):
    def count(collection, query=None):
        return asyncio.run(db[collection].count_documents(query or {}))
    return count
