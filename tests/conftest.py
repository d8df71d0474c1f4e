"""
Shared fixtures: in-memory catalog and session stores plus a sample catalog.

The fakes copy documents in and out like a real document store, so the
service never shares objects with what is "stored", and the session store
applies the same version check as MongoSessionStore.
"""
import copy

import pytest

from app.core.exceptions import ConcurrentUpdateError, StoreError
from app.models.catalog import Option, Question, Test as CatalogTest
from app.models.quiz_sessions import UserSession
from app.services.quiz_session_service import QuizSessionService


class InMemoryCatalogStore:
    def __init__(self, tests=None, questions=None):
        self.tests = list(tests or [])
        self.questions = list(questions or [])
        self.calls = []

    async def get_all_tests(self):
        self.calls.append("get_all_tests")
        return [t.model_copy(deep=True) for t in self.tests]

    async def get_test_by_id(self, test_id):
        self.calls.append("get_test_by_id")
        for test in self.tests:
            if test.id == test_id:
                return test.model_copy(deep=True)
        return None

    async def get_questions_by_test_id(self, test_id):
        self.calls.append("get_questions_by_test_id")
        return [q.model_copy(deep=True) for q in self.questions if q.test_id == test_id]

    async def get_question_by_id(self, question_id):
        self.calls.append("get_question_by_id")
        for question in self.questions:
            if question.id == question_id:
                return question.model_copy(deep=True)
        return None


class InMemorySessionStore:
    def __init__(self):
        self.docs = {}
        self.replace_calls = 0
        self.fail_next_replace = False
        # async callable(store, session) run right before the version check
        self.before_replace = None

    async def create_session(self, session):
        self.docs[session.id] = session.model_dump()
        return session.id

    async def get_session_by_id(self, session_id):
        doc = self.docs.get(session_id)
        if doc is None:
            return None
        return UserSession(**copy.deepcopy(doc))

    async def replace_session(self, session):
        self.replace_calls += 1
        if self.before_replace is not None:
            await self.before_replace(self, session)
        if self.fail_next_replace:
            self.fail_next_replace = False
            raise StoreError("Failed to update quiz session", detail="connection reset")

        stored = self.docs.get(session.id)
        if stored is None or stored["version"] != session.version:
            raise ConcurrentUpdateError(f"Session '{session.id}' was modified by another request.")

        doc = session.model_dump()
        doc["version"] = session.version + 1
        self.docs[session.id] = doc

    def stored(self, session_id):
        return UserSession(**copy.deepcopy(self.docs[session_id]))


# ---------------------------------------------------------------------------
# Sample catalog
# ---------------------------------------------------------------------------

def make_question(question_id, test_id, text, options):
    return Question(
        id=question_id,
        test_id=test_id,
        text=text,
        options=[Option(id=oid, text=otext, is_correct=ok) for oid, otext, ok in options],
    )


@pytest.fixture
def sample_tests():
    return [
        CatalogTest(id="T1", title="Basics", description="Two questions", total_questions=2),
        CatalogTest(id="T0", title="Empty", description="No questions yet", total_questions=0),
    ]


@pytest.fixture
def sample_questions():
    return [
        make_question("Q1", "T1", "What is 2+2?", [
            ("optA", "4", True),
            ("optB", "3", False),
        ]),
        make_question("Q2", "T1", "What is the capital of France?", [
            ("optC", "Berlin", False),
            ("optD", "Paris", True),
        ]),
    ]


@pytest.fixture
def catalog(sample_tests, sample_questions):
    return InMemoryCatalogStore(sample_tests, sample_questions)


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def service(catalog, session_store):
    return QuizSessionService(catalog=catalog, sessions=session_store, max_update_retries=3)
