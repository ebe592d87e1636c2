from ember.models.focus_workflow import FocusWorkflowRecord

__all__ = ["FocusWorkflowRecord"]
