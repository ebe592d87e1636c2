# Focus session questionnaire, in the order the user answers it
FOCUS_QUESTIONS = [
    {
        "kind": "problem",
        "prompt": 'What exactly is going wrong in "{category}"? Describe concretely what bothers you.',
    },
    {
        "kind": "obstacle",
        "prompt": "What has kept you from solving these problems before? Which obstacles do you see?",
    },
    {
        "kind": "time",
        "prompt": 'How much time would you like to spend on improving "{category}" next week? (from 10 minutes up to 84 hours)',
    },
]

# Used when the time answer contained no number
DEFAULT_TIME_BUDGET_MINUTES = 60
# Upper bound named in the time question
MAX_TIME_BUDGET_HOURS = 84
MAX_ACTIVITY_SUGGESTIONS = 5
NEUTRAL_RATING = 5
MIN_RATING = 1
MAX_RATING = 10

# User-facing messages
MESSAGES = {
    "answer_received": "Thanks for your answer!",
    "questions_complete": "Great! Now let's pick activities that will help you improve this area.",
    "continue_working": "Let's keep working on this area!",
    "stop_working": "Well done! Maybe you'd like to pick another area to work on?",
    "session_id_required": "Session ID required",
    "no_summary": "No session summary found",
}

# Canned activities served in offline mode
OFFLINE_ACTIVITIES = {
    "Health": [
        "Walk 10,000 steps a day",
        "Drink 8 glasses of water",
        "Do a 20-minute morning workout",
        "Cook a healthy breakfast",
        "Book a medical check-up",
    ],
    "Work": [
        "Plan the week ahead",
        "Learn a new tool or technology",
        "Reach out to a colleague",
        "Tidy up your workspace",
        "Take an online course",
    ],
    "Family & Relationships": [
        "Spend an evening without your phone",
        "Plan a family dinner",
        "Give someone close a compliment",
        "Do something nice for your partner",
        "Talk about plans for the future",
    ],
    "Friends & Social Life": [
        "Message a friend",
        "Plan a meetup",
        "Join a club that matches your interests",
        "Call an old friend",
        "Host a small get-together",
    ],
    "Rest & Recovery": [
        "Take a hot bath",
        "Read a book",
        "Listen to music",
        "Take a walk in the park",
        "Meditate for 10 minutes",
    ],
    "Self-perception": [
        "Write down 3 things you are grateful for",
        "Do something just for yourself",
        "Practice self-compassion",
        "Keep a journal",
        "Try a new hobby",
    ],
    "Hobbies": [
        "Start drawing",
        "Learn a new language",
        "Assemble a puzzle",
        "Try a new recipe",
        "Start a collection",
    ],
    "Finances": [
        "Draw up a budget",
        "Save 10% of your income",
        "Read about investing",
        "Pay off a debt",
        "Build an emergency fund",
    ],
}

OFFLINE_DEFAULT_ACTIVITIES = [
    "Spend some time alone with yourself",
    "Try something new",
    "Do something pleasant",
    "Practice mindfulness",
    "Thank yourself for the effort",
]

OFFLINE_SUMMARY = (
    "Great! You are already on your way. Let's check in a week from now "
    "to see how these activities affect your sense of balance and harmony."
)

OFFLINE_CHECK_IN_QUESTION = (
    'Hi! A week has passed since you decided to work on "{category}". '
    "Did you manage to do the planned activities? "
    "How would you rate this area now, from 1 to 10?"
)

ASSISTANT_PERSONA = (
    "You are Ember, a caring AI that helps people restore balance between work, "
    "themselves, relationships and rest. You do not treat or criticize; you gently "
    "guide and support."
)

OPENAI_PROMPTS = {
    "activities_system": ASSISTANT_PERSONA
    + " Your task is to suggest concrete, doable activities that improve the chosen "
    "area of life, taking into account the available time and the user's context.",
    "activities_user": (
        'The user wants to improve "{category}" and is ready to spend {minutes} minutes '
        "on it per week.\n\n"
        "User context: {user_context}\n\n"
        "Previous answers: {previous_answers}\n\n"
        "Suggest 5 concrete, doable activities that will improve this area. They must be:\n"
        "- realistic for the given time\n"
        "- concrete and measurable\n"
        '- suited to "{category}"\n'
        "- varied (simple actions, psychological techniques, events)\n\n"
        "Format: just the list of activities, one per line."
    ),
    "summary_system": ASSISTANT_PERSONA
    + " Your task is to sum up the session and give a supportive conclusion.",
    "summary_user": (
        "The user has finished a session of working on their life balance.\n\n"
        "Focus sessions: {focus_sessions}\n\n"
        "Current balance wheel: {wheel}\n\n"
        "Planned activities completed: {completed}\n\n"
        "Sum up the session in 2-3 paragraphs and close with an encouraging note that "
        "you will check in again in a week."
    ),
    "check_in_system": ASSISTANT_PERSONA
    + " Your task is to ask a caring question about the user's progress in the chosen area.",
    "check_in_user": (
        'A week has passed since the user started working on "{category}".\n\n'
        "Planned activities: {activities}\n\n"
        "Ask one caring question that helps the user:\n"
        "1. assess whether the plan was carried out\n"
        "2. re-rate the area from 1 to 10\n"
        "3. decide whether to keep working on it\n\n"
        "Be supportive and do not push."
    ),
}
