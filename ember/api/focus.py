from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status

from ember.api.deps import (
    get_engine,
    get_optional_session_key,
    get_session_key,
    require_session_key,
)
from ember.constants import MESSAGES
from ember.schemas import (
    ActiveFocusData,
    ApiResponse,
    CheckInQuestionData,
    FocusAnswerData,
    FocusAnswerRequest,
    HealthData,
    SelectActivitiesData,
    SelectActivitiesRequest,
    StartFocusData,
    WeeklyCheckInData,
    WeeklyCheckInRequest,
)
from ember.services.focus.engine import FocusSessionEngine, is_last_question

router = APIRouter(tags=["Focus sessions"])


@router.get("/health", response_model=ApiResponse)
async def health_check():
    return ApiResponse(
        success=True,
        data=HealthData(status="ok", timestamp=datetime.now(timezone.utc)),
    )


@router.get("/focus/active", response_model=ApiResponse)
async def get_active_focus_sessions(
    session_key: str = Depends(get_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    List the focus sessions that are still being worked on
    """
    workflows = await engine.get_active(session_key)
    return ApiResponse(success=True, data=ActiveFocusData(focus_sessions=workflows))


@router.post("/focus/{category}", response_model=ApiResponse)
async def start_focus_session(
    category: str,
    session_key: str = Depends(get_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    Start a focus session for a category and return its first question
    """
    workflow = await engine.create(session_key, category)
    return ApiResponse(
        success=True,
        data=StartFocusData(
            question=workflow.questions[0].prompt, session_id=workflow.session_key
        ),
    )


@router.post("/focus/{category}/answer", response_model=ApiResponse)
async def submit_focus_answer(
    category: str,
    body: FocusAnswerRequest,
    session_key: str = Depends(get_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    Submit the answer to one question.

    After the last question the response carries generated activity
    suggestions instead of a next question.
    """
    workflow = await engine.answer_question(
        session_key, category, body.question_index, body.answer
    )

    if is_last_question(workflow, body.question_index):
        activities = await engine.generate_activity_suggestions(
            category,
            workflow.time_budget_minutes,
            body.answer,
            workflow.answers,
        )
        return ApiResponse(
            success=True,
            data=FocusAnswerData(
                response=MESSAGES["questions_complete"],
                is_complete=True,
                activities=activities,
            ),
        )

    return ApiResponse(
        success=True,
        data=FocusAnswerData(
            response=MESSAGES["answer_received"],
            is_complete=False,
            next_question=workflow.questions[body.question_index + 1].prompt,
        ),
    )


@router.post("/focus/{category}/activities", response_model=ApiResponse)
async def select_activities(
    category: str,
    body: SelectActivitiesRequest,
    session_key: str = Depends(get_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    Save the activities the user picked and summarize the session
    """
    workflow = await engine.select_activities(
        session_key, category, body.selected_activities
    )
    session_summary = await engine.get_session_summary(session_key)
    wheel = [e for e in session_summary.wheel if e.category == category]
    summary = await engine.generate_summary_text([workflow], wheel, False)
    return ApiResponse(success=True, data=SelectActivitiesData(summary=summary))


@router.get("/focus/{category}/check-in-question", response_model=ApiResponse)
async def get_check_in_question(
    category: str,
    session_key: str = Depends(get_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    Question to open the weekly check-in with
    """
    question = await engine.generate_check_in_question(session_key, category)
    return ApiResponse(success=True, data=CheckInQuestionData(question=question))


@router.post("/check-in", response_model=ApiResponse)
async def submit_weekly_check_in(
    body: WeeklyCheckInRequest,
    header_session_key: Optional[str] = Depends(get_optional_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    Submit the weekly check-in for a focus session
    """
    session_key = require_session_key(header_session_key or body.session_id)
    session_summary = await engine.submit_weekly_check_in(
        session_key,
        body.category,
        body.completed_activities,
        body.new_rating,
        body.continue_working,
        body.notes,
    )
    summary = await engine.generate_summary_text(
        session_summary.focus_sessions,
        session_summary.wheel,
        body.completed_activities,
    )
    next_steps = (
        MESSAGES["continue_working"]
        if body.continue_working
        else MESSAGES["stop_working"]
    )
    return ApiResponse(
        success=True, data=WeeklyCheckInData(summary=summary, next_steps=next_steps)
    )


@router.get("/session-summary", response_model=ApiResponse)
async def get_session_summary(
    session_key: str = Depends(get_session_key),
    engine: FocusSessionEngine = Depends(get_engine),
):
    """
    Aggregate all focus sessions of the caller's session
    """
    summary = await engine.get_session_summary(session_key)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=MESSAGES["no_summary"]
        )
    return ApiResponse(success=True, data=summary)
