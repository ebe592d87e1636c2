from typing import Dict
from ember.crud.base import BaseCRUD


class UsersCRUD(BaseCRUD):
    """Users are keyed by the caller's session id"""

    table_name = "users"


class AnswersCRUD(BaseCRUD):
    """Wheel ratings submitted by users"""

    table_name = "answers"

    async def get_latest_ratings(self, session_key: str) -> Dict[str, int]:
        """Most recent rating per category for the user owning session_key"""
        user = await UsersCRUD(self.supabase).get_by("session_id", session_key)
        if not user:
            return {}

        ratings: Dict[str, int] = {}
        for answer in await self.list_by("user_id", user["id"], order_by="timestamp"):
            category = answer.get("category")
            try:
                value = int(answer.get("value"))
            except (TypeError, ValueError):
                self.logger.warning(
                    f"Skipping malformed rating {answer.get('value')!r} for {category}"
                )
                continue
            # Newest first, keep the first seen per category
            ratings.setdefault(category, value)
        return ratings
