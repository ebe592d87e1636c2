import re
from typing import List, Optional, Sequence

from ember.config import settings
from ember.constants import (
    OFFLINE_ACTIVITIES,
    OFFLINE_CHECK_IN_QUESTION,
    OFFLINE_DEFAULT_ACTIVITIES,
    OFFLINE_SUMMARY,
    OPENAI_PROMPTS,
)
from ember.logging import setup_logger
from ember.services.content.openai_service import AsyncOpenAIService
from ember.services.focus.errors import UnconfiguredError
from ember.services.focus.models import FocusWorkflow, WheelEntry

LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


def parse_activity_lines(content: str) -> List[str]:
    """Split a completion into one activity per non-empty line, without list markers"""
    activities = []
    for line in content.splitlines():
        cleaned = LIST_MARKER.sub("", line).strip()
        if cleaned:
            activities.append(cleaned)
    return activities


class SuggestionGenerator:
    """
    Produces activity suggestions, session summaries and check-in questions.

    In offline mode no OpenAI calls are made and canned texts are returned
    instead. Online, any OpenAI failure surfaces as GenerationFailedError.
    """

    def __init__(self, openai_service: Optional[AsyncOpenAIService] = None):
        self.logger = setup_logger(__name__)
        self.openai_service = openai_service

    @property
    def offline(self) -> bool:
        return self.openai_service is None

    @classmethod
    def from_settings(cls) -> "SuggestionGenerator":
        try:
            return cls(AsyncOpenAIService())
        except UnconfiguredError:
            if not settings.offline_mode_enabled:
                raise
        generator = cls()
        generator.logger.warning(
            "OPENAI_API_KEY not set. Running in offline mode with canned responses."
        )
        return generator

    async def _generate(self, system_key: str, user_key: str, **kwargs) -> str:
        return await self.openai_service.create_chat_completion(
            messages=[
                {"role": "system", "content": OPENAI_PROMPTS[system_key]},
                {"role": "user", "content": OPENAI_PROMPTS[user_key].format(**kwargs)},
            ],
        )

    async def generate_activity_suggestions(
        self,
        category: str,
        time_budget_minutes: int,
        user_context: str,
        previous_answers: Sequence[str],
    ) -> List[str]:
        if self.offline:
            return list(OFFLINE_ACTIVITIES.get(category, OFFLINE_DEFAULT_ACTIVITIES))

        self.logger.info(
            f"Generating activity suggestions for {category} ({time_budget_minutes} min/week)"
        )
        content = await self._generate(
            "activities_system",
            "activities_user",
            category=category,
            minutes=time_budget_minutes,
            user_context=user_context,
            previous_answers=", ".join(previous_answers),
        )
        return parse_activity_lines(content)

    async def generate_session_summary(
        self,
        workflows: Sequence[FocusWorkflow],
        wheel: Sequence[WheelEntry],
        completed_activities: bool,
    ) -> str:
        if self.offline:
            return OFFLINE_SUMMARY

        focus_sessions = "; ".join(
            f"{w.category}: {', '.join(w.selected_activities or [])}" for w in workflows
        )
        wheel_text = ", ".join(f"{e.category}: {e.value}/10" for e in wheel)
        return await self._generate(
            "summary_system",
            "summary_user",
            focus_sessions=focus_sessions,
            wheel=wheel_text or "not provided",
            completed="yes" if completed_activities else "no",
        )

    async def generate_check_in_question(
        self, category: str, selected_activities: Sequence[str]
    ) -> str:
        if self.offline:
            return OFFLINE_CHECK_IN_QUESTION.format(category=category)

        return await self._generate(
            "check_in_system",
            "check_in_user",
            category=category,
            activities=", ".join(selected_activities) or "none selected",
        )
