import re
from typing import List, Optional, Sequence

from ember.constants import (
    DEFAULT_TIME_BUDGET_MINUTES,
    FOCUS_QUESTIONS,
    MAX_ACTIVITY_SUGGESTIONS,
    MAX_RATING,
    MAX_TIME_BUDGET_HOURS,
    MIN_RATING,
    NEUTRAL_RATING,
)
from ember.logging import log_exception, setup_logger
from ember.services.content.generator import SuggestionGenerator
from ember.services.focus.errors import (
    FocusSessionError,
    GenerationFailedError,
    InvalidArgumentError,
    NotFoundError,
)
from ember.services.focus.locks import KeyedLock
from ember.services.focus.models import (
    FocusQuestion,
    FocusWorkflow,
    QuestionKind,
    SessionSummary,
    WheelEntry,
    WorkflowStatus,
)
from ember.services.focus.ratings import NeutralRatingProvider, RatingProvider
from ember.services.focus.store import SessionStore

HOURS_PATTERN = re.compile(r"\d+", re.ASCII)


def build_questions(category: str) -> List[FocusQuestion]:
    """The fixed problem/obstacle/time questionnaire for a category"""
    return [
        FocusQuestion(kind=q["kind"], prompt=q["prompt"].format(category=category))
        for q in FOCUS_QUESTIONS
    ]


def parse_time_budget(text: str) -> Optional[int]:
    """
    Read the first number in a free-text answer as hours per week.

    Returns the budget in minutes, or None when the text has no digits.

    Raises:
        InvalidArgumentError: the number exceeds MAX_TIME_BUDGET_HOURS
    """
    match = HOURS_PATTERN.search(text)
    if not match:
        return None

    # Length check first so huge digit runs never reach int()
    digits = match.group().lstrip("0") or "0"
    if len(digits) > len(str(MAX_TIME_BUDGET_HOURS)) or int(digits) > MAX_TIME_BUDGET_HOURS:
        raise InvalidArgumentError(
            f"Time budget must be at most {MAX_TIME_BUDGET_HOURS} hours per week"
        )
    return int(digits) * 60


def is_last_question(workflow: FocusWorkflow, index: int) -> bool:
    return index == len(workflow.questions) - 1


class FocusSessionEngine:
    """
    State machine behind focus sessions.

    Each mutating operation runs load -> mutate -> store while holding the
    lock for its (session key, category) pair. Calls to the suggestion
    generator happen outside those locks.
    """

    def __init__(
        self,
        store: SessionStore,
        generator: SuggestionGenerator,
        rating_provider: Optional[RatingProvider] = None,
    ):
        self.logger = setup_logger(__name__)
        self.store = store
        self.generator = generator
        self.rating_provider = rating_provider or NeutralRatingProvider()
        self._locks = KeyedLock()

    async def _load(self, session_key: str, category: str) -> FocusWorkflow:
        workflow = await self.store.get(session_key, category)
        if workflow is None:
            raise NotFoundError(session_key, category)
        return workflow

    def _set_status(self, workflow: FocusWorkflow, status: WorkflowStatus) -> None:
        previous = workflow.status
        workflow.status = status
        self.logger.info(
            f"State transition for {workflow.key}: {previous.value} -> {status.value}"
        )

    async def create(self, session_key: str, category: str) -> FocusWorkflow:
        """
        Start a focus session for a category.

        An existing session for the same pair is replaced, together with
        its answers.
        """
        async with self._locks.hold((session_key, category)):
            existing = await self.store.get(session_key, category)
            if existing is not None:
                self.logger.warning(
                    f"Restarting focus session {existing.key}, discarding "
                    f"{len(existing.answers)} answers"
                )
            workflow = FocusWorkflow(
                session_key=session_key,
                category=category,
                questions=build_questions(category),
            )
            await self.store.put(workflow)

        self.logger.info(f"Created focus session {workflow.key}")
        return workflow

    async def get(self, session_key: str, category: str) -> FocusWorkflow:
        return await self._load(session_key, category)

    async def answer_question(
        self, session_key: str, category: str, index: int, text: str
    ) -> FocusWorkflow:
        """
        Record the answer to one question.

        Args:
            session_key: Caller-owned session identifier
            category: Category the focus session is about
            index: Zero-based question position
            text: Free-text answer

        Returns:
            The updated workflow. Status is left unchanged.

        Raises:
            NotFoundError: No focus session for the pair
            InvalidArgumentError: index is outside the questionnaire, or a
                time answer exceeds MAX_TIME_BUDGET_HOURS
        """
        async with self._locks.hold((session_key, category)):
            workflow = await self._load(session_key, category)
            if not 0 <= index < len(workflow.questions):
                raise InvalidArgumentError(
                    f"Question index {index} out of range 0..{len(workflow.questions) - 1}"
                )

            question = workflow.questions[index]
            question.answer = text
            if question.kind == QuestionKind.TIME:
                workflow.time_budget_minutes = parse_time_budget(text)
                self.logger.info(
                    f"Time budget for {workflow.key}: {workflow.time_budget_minutes} minutes"
                )

            workflow.touch()
            await self.store.put(workflow)

        self.logger.info(f"Recorded answer {index} for {workflow.key}")
        return workflow

    async def get_active(self, session_key: str) -> List[FocusWorkflow]:
        workflows = await self.store.list_by_session(session_key)
        return [w for w in workflows if w.status == WorkflowStatus.ACTIVE]

    async def select_activities(
        self, session_key: str, category: str, chosen: Sequence[str]
    ) -> FocusWorkflow:
        """Store the chosen activities and complete the questionnaire"""
        async with self._locks.hold((session_key, category)):
            workflow = await self._load(session_key, category)
            workflow.selected_activities = list(dict.fromkeys(chosen))
            self._set_status(workflow, WorkflowStatus.COMPLETED)
            workflow.touch()
            await self.store.put(workflow)
        return workflow

    async def generate_activity_suggestions(
        self,
        category: str,
        time_budget_minutes: Optional[int],
        user_context: str,
        previous_answers: Sequence[str],
    ) -> List[str]:
        """At most five candidate activities; an unset budget uses the default"""
        minutes = (
            time_budget_minutes
            if time_budget_minutes is not None
            else DEFAULT_TIME_BUDGET_MINUTES
        )
        try:
            suggestions = await self.generator.generate_activity_suggestions(
                category, minutes, user_context, list(previous_answers)
            )
        except FocusSessionError:
            raise
        except Exception as e:
            log_exception(self.logger, f"Activity generation failed for {category}", e)
            raise GenerationFailedError("Activity generation failed") from e

        cleaned = [s.strip() for s in suggestions if s and s.strip()]
        return cleaned[:MAX_ACTIVITY_SUGGESTIONS]

    async def generate_summary_text(
        self,
        workflows: Sequence[FocusWorkflow],
        wheel: Sequence[WheelEntry],
        completed_activities: bool,
    ) -> str:
        try:
            return await self.generator.generate_session_summary(
                workflows, wheel, completed_activities
            )
        except FocusSessionError:
            raise
        except Exception as e:
            log_exception(self.logger, "Session summary generation failed", e)
            raise GenerationFailedError("Session summary generation failed") from e

    async def generate_check_in_question(self, session_key: str, category: str) -> str:
        workflow = await self._load(session_key, category)
        try:
            return await self.generator.generate_check_in_question(
                category, workflow.selected_activities or []
            )
        except FocusSessionError:
            raise
        except Exception as e:
            log_exception(self.logger, f"Check-in question failed for {category}", e)
            raise GenerationFailedError("Check-in question generation failed") from e

    async def submit_weekly_check_in(
        self,
        session_key: str,
        category: str,
        completed_activities: bool,
        new_rating: int,
        continue_working: bool,
        notes: Optional[str] = None,
    ) -> SessionSummary:
        """
        Reconcile a weekly check-in.

        Continuing reopens the session, otherwise it is completed, whatever
        its previous status was.

        Raises:
            InvalidArgumentError: new_rating is not an integer from 1 to 10
            NotFoundError: No focus session for the pair
        """
        if (
            isinstance(new_rating, bool)
            or not isinstance(new_rating, int)
            or not MIN_RATING <= new_rating <= MAX_RATING
        ):
            raise InvalidArgumentError(
                f"Rating must be an integer from {MIN_RATING} to {MAX_RATING}, got {new_rating!r}"
            )

        async with self._locks.hold((session_key, category)):
            workflow = await self._load(session_key, category)
            self._set_status(
                workflow,
                WorkflowStatus.ACTIVE if continue_working else WorkflowStatus.COMPLETED,
            )
            if notes:
                workflow.check_in_notes = notes
            workflow.touch()
            await self.store.put(workflow)

        self.logger.info(
            f"Check-in for {workflow.key}: rating={new_rating}, "
            f"completed_activities={completed_activities}, notes={notes!r}"
        )
        return SessionSummary(
            session_key=session_key,
            focus_sessions=[workflow],
            wheel=[
                WheelEntry(
                    category=category, value=new_rating, is_working_on=continue_working
                )
            ],
        )

    async def get_session_summary(self, session_key: str) -> Optional[SessionSummary]:
        """All focus sessions of a session key with one wheel entry each, or None"""
        workflows = await self.store.list_by_session(session_key)
        if not workflows:
            return None
        workflows.sort(key=lambda w: w.created_at)

        ratings = await self.rating_provider.latest_ratings(session_key)
        wheel = []
        for workflow in workflows:
            value = ratings.get(workflow.category, NEUTRAL_RATING)
            if not MIN_RATING <= value <= MAX_RATING:
                self.logger.warning(
                    f"Ignoring out of range rating {value} for {workflow.category}"
                )
                value = NEUTRAL_RATING
            wheel.append(
                WheelEntry(
                    category=workflow.category,
                    value=value,
                    is_working_on=workflow.status == WorkflowStatus.ACTIVE,
                )
            )

        return SessionSummary(
            session_key=session_key, focus_sessions=workflows, wheel=wheel
        )
