from abc import ABC, abstractmethod
from typing import Dict

from ember.crud.answers import AnswersCRUD


class RatingProvider(ABC):
    """Source of the latest wheel rating per category for a session"""

    @abstractmethod
    async def latest_ratings(self, session_key: str) -> Dict[str, int]:
        """Map of category to its most recent 1-10 rating"""


class NeutralRatingProvider(RatingProvider):
    """No rating source configured; callers fall back to the neutral midpoint"""

    async def latest_ratings(self, session_key: str) -> Dict[str, int]:
        return {}


class SupabaseRatingProvider(RatingProvider):
    """Reads ratings the user submitted through the wheel questionnaire"""

    def __init__(self, answers_crud: AnswersCRUD):
        self.answers_crud = answers_crud

    async def latest_ratings(self, session_key: str) -> Dict[str, int]:
        return await self.answers_crud.get_latest_ratings(session_key)
