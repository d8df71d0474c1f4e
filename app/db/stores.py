"""
Store contracts consumed by the quiz session engine
FILE: app/db/stores.py
"""
from typing import List, Optional, Protocol

from app.models.catalog import Question, Test
from app.models.quiz_sessions import UserSession


class CatalogStore(Protocol):
    """Read access to tests and their questions"""

    async def get_test_by_id(self, test_id: str) -> Optional[Test]: ...

    async def get_questions_by_test_id(self, test_id: str) -> List[Question]:
        """Questions of a test, in a stable order"""
        ...

    async def get_question_by_id(self, question_id: str) -> Optional[Question]: ...

    async def get_all_tests(self) -> List[Test]: ...


class SessionStore(Protocol):
    """Create/fetch/replace access to user sessions"""

    async def create_session(self, session: UserSession) -> str: ...

    async def get_session_by_id(self, session_id: str) -> Optional[UserSession]: ...

    async def replace_session(self, session: UserSession) -> None:
        """
        Full-document replace, conditional on session.version

        Raises ConcurrentUpdateError if the stored version moved on.
        """
        ...
