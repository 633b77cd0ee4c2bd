"""
Medicare Healthcare Assistant: Streamlit front-end.

Run with:  streamlit run ui/medicare_app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import streamlit as st

from src.consultation.formatter import format_message, to_markdown
from src.consultation.models import BotEntry
from src.consultation.report import build_report
from src.consultation.service import ConversationController
from utils.settings import load_settings

LOGO_PATH = Path(__file__).resolve().parents[1] / "assets" / "logo.png"

st.set_page_config(page_title="Medicare Healthcare Assistant", page_icon="🩺", layout="centered")

# ============================================================================
# Session state
# ============================================================================

if "controller" not in st.session_state:
    st.session_state.controller = ConversationController(settings=load_settings())

controller: ConversationController = st.session_state.controller

# A question typed on the previous run is answered on this one, so the input
# can be rendered disabled while the request is in flight.
queued = st.session_state.pop("queued_question", None)

# ============================================================================
# Sidebar
# ============================================================================

with st.sidebar:
    st.header("⚙️ Configuration")
    st.caption(f"Model: **{controller.settings.model}**")
    if controller.settings.has_api_key:
        st.caption("API key: configured")
    else:
        st.warning("API key missing. Set GEMINI_API_KEY in your environment or .env file.")

    st.divider()
    st.caption("**Session Statistics**")
    st.caption(f"Questions: {sum(1 for e in controller.entries if e.kind == 'user')}")
    st.caption(f"Reports: {len(controller.bot_entries())}")

# ============================================================================
# Chat view
# ============================================================================

st.title("Medicare Healthcare Assistant")

prompt = st.chat_input(
    "Type your health-related question...",
    disabled=queued is not None or controller.pending,
)


def render_report(entry: BotEntry, position: int) -> None:
    with st.container(border=True):
        head_left, head_right = st.columns([3, 1])
        head_left.markdown("📄 **Medical Consultation Report**")
        head_right.caption(f"ID: {entry.report_id}")

        st.caption("Timestamp")
        st.write(entry.display_timestamp)

        st.caption("Patient Query")
        st.info(entry.query)

        st.caption("Medical Response")
        st.success(to_markdown(format_message(entry.response)))

        report = build_report(entry)
        st.download_button(
            "⬇️ Download Report",
            data=report.content,
            file_name=report.filename,
            mime=report.mime,
            key=f"download-{position}-{entry.report_id}",
        )


if not controller.has_history() and queued is None:
    with st.container():
        if LOGO_PATH.exists():
            st.image(str(LOGO_PATH), width=128)
        st.markdown("👋 **Hello! I am your healthcare assistant.**")
        st.caption("How can I help you today?")

for position, entry in enumerate(controller.entries):
    if isinstance(entry, BotEntry):
        with st.chat_message("assistant", avatar="🤖"):
            render_report(entry, position)
    else:
        with st.chat_message("user"):
            st.markdown(entry.text)

if queued is not None:
    with st.chat_message("user"):
        st.markdown(queued)
    with st.spinner("Sending..."):
        controller.submit(queued)
    st.rerun()

if controller.error:
    st.error(controller.error)

if prompt:
    st.session_state.queued_question = prompt
    st.rerun()
