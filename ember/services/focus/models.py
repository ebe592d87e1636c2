from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuestionKind(str, Enum):
    PROBLEM = "problem"
    OBSTACLE = "obstacle"
    TIME = "time"


class WorkflowStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class FocusQuestion(BaseModel):
    """One step of the focus questionnaire"""

    kind: QuestionKind
    prompt: str
    answer: Optional[str] = None


class FocusWorkflow(BaseModel):
    """Focus session state for one (session key, category) pair"""

    model_config = ConfigDict(validate_assignment=True)

    session_key: str
    category: str
    questions: List[FocusQuestion]
    time_budget_minutes: Optional[int] = None
    selected_activities: Optional[List[str]] = None
    check_in_notes: Optional[str] = None
    status: WorkflowStatus = WorkflowStatus.ACTIVE
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def key(self) -> tuple:
        return (self.session_key, self.category)

    @property
    def answers(self) -> List[str]:
        """Non-empty answers in question order"""
        return [q.answer for q in self.questions if q.answer]

    def touch(self) -> None:
        self.updated_at = utcnow()


class WheelEntry(BaseModel):
    category: str
    value: int = Field(ge=1, le=10)
    is_working_on: bool = False


class SessionSummary(BaseModel):
    """Read-only projection over all focus sessions of a session key"""

    session_key: str
    focus_sessions: List[FocusWorkflow]
    wheel: List[WheelEntry]
    last_check_in: datetime = Field(default_factory=utcnow)
