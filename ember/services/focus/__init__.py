"""
Focus session workflow.

Holds the state machine that walks a user through the focus questionnaire
for one category, records the chosen activities and reconciles weekly
check-ins, together with the stores that keep the workflow records.
"""
