"""PM Assist — Streamlit UI for turning product ideas into plans."""

import sys
from pathlib import Path

# Add project root to path so 'pma' package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import asyncio

import streamlit as st

from pma.config import get_config
from pma.errors import PMAError
from pma.graph import run_pipeline
from pma.session import AnswerQuestions, AwaitingStackSelection, Complete, advance, start_guided_session
from pma.utils.formatter import delete_plan, list_plans, read_plan, write_guided_plan, write_plan

st.set_page_config(page_title="PM Assist", layout="wide")
st.title("PM Assist")
st.markdown(
    "Turns a rough product idea into a structured product plan. **Quick** mode runs "
    "expansion, critique and refinement in one go; **Guided** mode walks you through "
    "picking a tech stack and answering open questions first."
)

st.divider()

DEPTH_LABELS = {
    1: "1 stage: expand only",
    2: "2 stages: expand + critique",
    3: "3 stages: full structured plan",
}


# ---------------------------------------------------------------------------
# Sidebar: saved plans
# ---------------------------------------------------------------------------


def _render_saved_plans() -> None:
    """List saved plans with view and delete actions."""
    st.sidebar.header("Saved plans")
    try:
        names = list_plans()
    except OSError as exc:
        st.sidebar.error(str(exc))
        return

    if not names:
        st.sidebar.caption("*No plans saved yet.*")
        return

    selected = st.sidebar.selectbox("Plan", names, key="saved_plan")
    col_view, col_delete = st.sidebar.columns(2)
    if col_view.button("View", key="view_plan"):
        st.session_state["viewing_plan"] = selected
    if col_delete.button("Delete", key="delete_plan"):
        try:
            delete_plan(selected)
        except (ValueError, FileNotFoundError) as exc:
            st.sidebar.error(str(exc))
        else:
            if st.session_state.get("viewing_plan") == selected:
                st.session_state["viewing_plan"] = None
            st.rerun()


def _render_viewed_plan() -> None:
    name = st.session_state.get("viewing_plan")
    if not name:
        return
    try:
        content = read_plan(name)
    except (ValueError, FileNotFoundError) as exc:
        st.error(str(exc))
        st.session_state["viewing_plan"] = None
        return
    with st.expander(f"Saved plan: {name}", expanded=True):
        st.markdown(content)
        if st.button("Close", key="close_plan"):
            st.session_state["viewing_plan"] = None
            st.rerun()


def _render_plan_output(content: str, output_path: Path) -> None:
    st.success(f"Plan saved to {output_path}")
    st.download_button(
        label="Download plan",
        data=content,
        file_name=output_path.name,
        mime="text/markdown",
    )
    st.markdown(content)


# ---------------------------------------------------------------------------
# Quick mode
# ---------------------------------------------------------------------------


def _render_quick_mode() -> None:
    idea = st.text_area(
        "Enter your product idea:",
        height=200,
        placeholder="Describe the product you want to plan...",
        key="quick_idea",
    )
    depth = st.radio(
        "Pipeline depth",
        options=list(DEPTH_LABELS),
        index=list(DEPTH_LABELS).index(get_config().get("default_depth", 3)),
        format_func=DEPTH_LABELS.get,
        horizontal=True,
    )

    if not st.button("Generate plan", type="primary"):
        return
    if not idea or not idea.strip():
        st.error("Please enter a non-empty product idea.")
        st.stop()

    with st.status("Generating plan...", expanded=False) as status_widget:
        try:
            result = asyncio.run(run_pipeline(idea, depth))
        except (PMAError, ValueError) as exc:
            status_widget.update(label="Generation failed", state="error")
            st.error(str(exc))
            return
        status_widget.update(label="Generation complete", state="complete")

    if result.is_simple_response:
        st.info(result.simple_response)
        return

    output_path = write_plan(result)
    _render_plan_output(output_path.read_text(encoding="utf-8"), output_path)


# ---------------------------------------------------------------------------
# Guided mode: one chat message = one session turn
# ---------------------------------------------------------------------------


def _append_message(role: str, content: str) -> None:
    st.session_state.setdefault("guided_messages", []).append({"role": role, "content": content})


def _reset_guided() -> None:
    st.session_state["guided_session"] = None
    st.session_state["guided_messages"] = []
    st.session_state["guided_output"] = None


def _guided_turn(user_input: str) -> None:
    """Run one turn. On error the stored session is left as it was."""
    session = st.session_state.get("guided_session")
    try:
        with st.spinner("Thinking..."):
            if session is None:
                new_session, reply = asyncio.run(start_guided_session(user_input))
            else:
                new_session, reply = asyncio.run(advance(session, user_input))
    except (PMAError, ValueError) as exc:
        st.session_state["guided_error"] = str(exc)
        return

    _append_message("user", user_input)
    st.session_state["guided_session"] = new_session
    st.session_state["guided_error"] = None

    if isinstance(new_session, Complete):
        output_path = write_guided_plan(new_session.final_plan)
        st.session_state["guided_output"] = str(output_path)
        _append_message("assistant", "Your plan is ready.")
    else:
        _append_message("assistant", reply)


def _render_guided_mode() -> None:
    session = st.session_state.get("guided_session")

    if st.button("Start over", key="guided_reset"):
        _reset_guided()
        st.rerun()

    for message in st.session_state.get("guided_messages", []):
        with st.chat_message(message["role"]):
            st.markdown(message["content"])

    if st.session_state.get("guided_error"):
        st.error(st.session_state["guided_error"])

    if isinstance(session, Complete):
        output_path = Path(st.session_state["guided_output"])
        _render_plan_output(session.final_plan, output_path)
        return

    if session is None:
        placeholder = "Describe your product idea..."
    elif isinstance(session, AwaitingStackSelection):
        placeholder = f'Pick a stack (1-{len(session.tech_stacks)}) or "auto"'
    elif isinstance(session, AnswerQuestions):
        placeholder = "Your answer..."
    else:
        placeholder = "Continue..."

    user_input = st.chat_input(placeholder)
    if user_input:
        _guided_turn(user_input)
        st.rerun()


# ---------------------------------------------------------------------------
# Page logic
# ---------------------------------------------------------------------------

_render_saved_plans()
_render_viewed_plan()

quick_tab, guided_tab = st.tabs(["Quick", "Guided"])
with quick_tab:
    _render_quick_mode()
with guided_tab:
    _render_guided_mode()
