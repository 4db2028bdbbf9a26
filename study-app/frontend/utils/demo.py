"""Canned conversations for the landing-page demo. No network involved."""
from __future__ import annotations
from typing import List, Tuple

TYPING_DELAY_SECONDS = 1.5

# (suggested question, keywords that select it, answer)
DEMO_CONVERSATIONS: List[Tuple[str, Tuple[str, ...], str]] = [
    (
        "Can you explain the Pythagorean theorem?",
        ("pythagorean", "pythagoras", "hypotenuse"),
        "The Pythagorean theorem states that in a right triangle, the square of the hypotenuse (c) "
        "equals the sum of squares of the other two sides (a and b): a² + b² = c². For example, if "
        "a=3 and b=4, then c=5 because 9+16=25. This is fundamental in geometry and has countless "
        "real-world applications!",
    ),
    (
        "What causes photosynthesis?",
        ("photosynthesis", "chlorophyll"),
        "Photosynthesis is how plants convert sunlight into energy! Plants use chlorophyll (the green "
        "pigment) to capture light energy, then combine CO₂ from air and H₂O from soil to create "
        "glucose (sugar) for energy. The bonus? They release oxygen as a byproduct, which we breathe! 🌱",
    ),
    (
        "Help me understand World War II's main causes",
        ("world war", "wwii", "ww2"),
        "WWII (1939-1945) had several key causes: 1) Treaty of Versailles left Germany humiliated with "
        "harsh penalties, 2) Rise of fascism in Germany, Italy & Japan, 3) Global economic depression, "
        "4) Policy of appeasement that allowed Hitler's expansion, and 5) Germany's invasion of Poland. "
        "These factors combined created the deadliest conflict in history.",
    ),
]


def suggested_questions() -> List[str]:
    return [q for q, _, _ in DEMO_CONVERSATIONS]


def pick_demo_answer(question: str, turn: int = 0) -> str:
    """
    Answer whose keywords appear in the question, otherwise rotate through
    the canned answers by ``turn``.
    """
    text = (question or "").lower()
    for _, keywords, answer in DEMO_CONVERSATIONS:
        if any(k in text for k in keywords):
            return answer
    return DEMO_CONVERSATIONS[turn % len(DEMO_CONVERSATIONS)][2]
