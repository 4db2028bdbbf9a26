from __future__ import annotations
import streamlit as st
from utils.helper import safe_markdown

TYPING_INDICATOR = "_StudyBuddy is typing…_"


# ---------- Chat ----------
def chat_message(role: str, content: str, avatar: str | None = None):
    """Render a single chat message with safe markdown + avatar."""
    with st.chat_message(role, avatar=avatar or ("👤" if role == "user" else "🤖")):
        safe_markdown(content)


def typing_bubble():
    """Empty assistant bubble; returns the placeholder to stream text into."""
    with st.chat_message("assistant", avatar="🤖"):
        slot = st.empty()
        slot.markdown(TYPING_INDICATOR)
    return slot


# ---------- Confirmation pattern ----------
def confirm_phrase(label: str, phrase: str, key: str) -> bool:
    """Text box that only returns True once the user typed ``phrase`` exactly."""
    typed = st.text_input(label, key=key, placeholder=phrase)
    return typed == phrase
