# This file makes the ember directory a Python package

"""
Ember: guided focus sessions for improving life-balance categories.

This package provides a FastAPI application that walks a user through a
short questionnaire about one category, suggests activities, and reconciles
weekly check-ins.
"""

__version__ = "0.1.0"
