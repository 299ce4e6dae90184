# finpulse/planner/persona.py
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

# Each question offers three answers; each answer moves (risk, discipline).
QUIZ_QUESTIONS: List[Dict] = [
    {
        "question": "When it comes to investing, I'm more concerned about...",
        "answers": [
            ("Missing out on potential gains.", (2, 0)),
            ("Losing my initial investment.", (-2, 0)),
            ("A balance of both.", (0, 0)),
        ],
    },
    {
        "question": "Imagine you receive a surprise bonus of ₹50,000. What's your first instinct?",
        "answers": [
            ("Invest it aggressively in stocks for high growth.", (2, 0)),
            ("Put it straight into a safe fixed deposit or savings account.", (-2, 0)),
            ("Split it between safe options and some moderate-risk investments.", (0, 0)),
        ],
    },
    {
        "question": "My ideal financial future involves:",
        "answers": [
            ("Building significant wealth, even if it means taking big risks.", (2, 0)),
            ("Ensuring my money is safe and secure, with slow, steady growth.", (-2, 0)),
            ("A comfortable lifestyle with a mix of growth and security.", (0, 0)),
        ],
    },
    {
        "question": "How often do you track your monthly income and expenses?",
        "answers": [
            ("Diligently. I follow a budget.", (0, 2)),
            ("Sometimes, but not consistently.", (0, 0)),
            ("Rarely or never.", (0, -2)),
        ],
    },
    {
        "question": "Which statement best describes your approach to financial goals?",
        "answers": [
            ("I have specific, written long-term goals I'm working towards.", (0, 2)),
            ("I have some general ideas about what I want in the future.", (0, 0)),
            ("I focus more on my short-term needs and wants.", (0, -2)),
        ],
    },
]


def quiz_scores(answers: Sequence[int]) -> Tuple[int, int]:
    if len(answers) != len(QUIZ_QUESTIONS):
        raise ValueError(f"Expected {len(QUIZ_QUESTIONS)} answers, got {len(answers)}")
    risk = 0
    discipline = 0
    for idx, (question, choice) in enumerate(zip(QUIZ_QUESTIONS, answers)):
        options = question["answers"]
        if isinstance(choice, bool) or not isinstance(choice, int) or not 0 <= choice < len(options):
            raise ValueError(f"Answer {idx + 1} must be between 0 and {len(options) - 1}")
        d_risk, d_discipline = options[choice][1]
        risk += d_risk
        discipline += d_discipline
    return risk, discipline


def persona_for(risk: int, discipline: int) -> str:
    if discipline > 0:
        if risk > 1:
            return "Adventurer"
        if risk < -1:
            return "Guardian"
        return "Planner"
    if risk > 1:
        return "Accumulator"
    if risk < -1:
        return "Spender"
    return "Seeker"


def score_persona(answers: Sequence[int]) -> str:
    return persona_for(*quiz_scores(answers))
