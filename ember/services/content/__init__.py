"""
Text generation for focus sessions.

Wraps the OpenAI client and turns its completions into activity lists,
session summaries and check-in questions.
"""
