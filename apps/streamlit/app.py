"""
Coastal Chat Streamlit Widget
=============================

Browser chat front-end for the Coastal Chat relay.

Features:
  - Landing view with starter questions
  - Message history rendered as markdown
  - Typing indicator while the assistant is answering
  - Conversation thread kept for the whole browser session

Usage:
    uvicorn app.main:app                # relay on :8000
    streamlit run apps/streamlit/app.py
"""

import asyncio

import streamlit as st

from app.config import settings
from app.schemas.chat import MessageRole
from app.services.chat_surface import STARTER_MESSAGES, ChatSurface, RelayClient

st.set_page_config(
    page_title="Coastal Babysitters Assistant",
    page_icon="💬",
    layout="centered",
)


def get_surface() -> ChatSurface:
    """One ChatSurface per browser session (kept across reruns)."""
    if "surface" not in st.session_state:
        st.session_state.surface = ChatSurface(
            RelayClient(settings.relay_url),
            typing_delay=settings.typing_delay,
        )
    return st.session_state.surface


def run_turn(prompt: str, coro) -> None:
    """Show the pending prompt right away, then wait for the reply under a spinner."""
    with st.chat_message(MessageRole.USER.value, avatar="🧑"):
        st.markdown(prompt)
    with st.spinner("Typing…"):
        asyncio.run(coro)
    st.rerun()


surface = get_surface()

# ---------------------------------------------------------------------------
# Landing view
# ---------------------------------------------------------------------------
if not surface.has_started_chat:
    st.title("Coastal Babysitters")
    st.caption("Ask anything about the sitter handbook: policies, forms, and what to do when.")

    cols = st.columns(2)
    for i, starter in enumerate(STARTER_MESSAGES):
        if cols[i % 2].button(starter, key=f"starter-{i}", use_container_width=True):
            run_turn(starter, surface.start_with(starter))

# ---------------------------------------------------------------------------
# Chat view
# ---------------------------------------------------------------------------
else:
    for msg in surface.messages:
        avatar = "🧑" if msg.role == MessageRole.USER else "🤖"
        with st.chat_message(msg.role.value, avatar=avatar):
            st.markdown(msg.content)

prompt = st.chat_input("Type your message…", disabled=surface.is_loading)
if prompt and prompt.strip() and not surface.is_loading:
    run_turn(prompt, surface.submit(prompt))
