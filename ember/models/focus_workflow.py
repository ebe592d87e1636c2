from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from ember.db.base import Base


class FocusWorkflowRecord(Base):
    """
    Persisted focus session, one row per (session key, category)
    """

    __tablename__ = "focus_workflows"

    session_key = Column(String(255), primary_key=True)
    category = Column(String(255), primary_key=True)

    questions = Column(JSON, nullable=False)
    time_budget_minutes = Column(Integer, nullable=True)
    selected_activities = Column(JSON, nullable=True)
    check_in_notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")

    # Timestamps, stored as naive UTC
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<FocusWorkflowRecord session_key={self.session_key} category={self.category}>"
