from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ember.services.focus.models import FocusWorkflow


class ApiResponse(BaseModel):
    """Envelope shared by every endpoint"""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


class RequestModel(BaseModel):
    # Accept both snake_case and the camelCase names of the web client
    model_config = ConfigDict(populate_by_name=True)


class FocusAnswerRequest(RequestModel):
    answer: str = Field(min_length=1)
    question_index: int = Field(alias="questionIndex")


class SelectActivitiesRequest(RequestModel):
    selected_activities: List[str] = Field(alias="selectedActivities")


class WeeklyCheckInRequest(RequestModel):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    category: str = Field(min_length=1)
    completed_activities: bool = Field(alias="completedActivities")
    new_rating: int = Field(alias="newRating", ge=1, le=10)
    continue_working: bool = Field(alias="continueWorking")
    notes: Optional[str] = None


class HealthData(BaseModel):
    status: str
    timestamp: datetime


class StartFocusData(BaseModel):
    question: str
    session_id: str


class FocusAnswerData(BaseModel):
    response: str
    is_complete: bool
    next_question: Optional[str] = None
    activities: Optional[List[str]] = None


class SelectActivitiesData(BaseModel):
    summary: str
    calendar_integration: bool = True


class CheckInQuestionData(BaseModel):
    question: str


class ActiveFocusData(BaseModel):
    focus_sessions: List[FocusWorkflow]


class WeeklyCheckInData(BaseModel):
    summary: str
    next_steps: str
