"""
Studio Pages
Single-tool pages: Vision, Language, and Market Trends. Each keeps its own InvocationBoard.
"""

import functools

import streamlit as st

import cloudlab.ui as ui
from cloudlab import adapters
from cloudlab.adapters import TextTask
from cloudlab.image_input import decode_data_url, image_from_upload
from cloudlab.invocation import InvocationStatus

LANGUAGES = ["English", "Spanish", "Portuguese", "French", "German", "Japanese"]


def render_vision(client):
    st.header("👁️ Vision Analysis")
    st.caption("Cloud Vision stand-in: objects, text, and scene description.")

    board = ui.get_board("vision_board")
    board.register("vision")
    state = board.state("vision")

    uploaded = st.file_uploader("Upload an image", type=["png", "jpg", "jpeg", "webp", "gif"])
    if uploaded is not None:
        board.set_input("vision", image_from_upload(uploaded))
        st.image(uploaded, width="stretch")

    prompt = st.text_input("Instruction (optional)", placeholder=adapters.DEFAULT_VISION_PROMPT)

    async def _handler(value):
        return await adapters.analyze_image(client, decode_data_url(value), prompt)

    if st.button("🔍 Analyze", type="primary", disabled=state.is_loading):
        with st.spinner("Analyzing image..."):
            ui.run_invocations(board, {"vision": _handler})
        st.rerun()

    _render_text_result(state)


def render_language(client):
    st.header("🌐 Language Studio")
    st.caption("Translation, sentiment/entity analysis, and business Q&A.")

    board = ui.get_board("language_board")

    text = st.text_area("Text", height=180, placeholder="Paste text, a review, or a customer question...")
    target_lang = st.selectbox("Translate to", LANGUAGES, index=1)

    buttons = [
        (TextTask.TRANSLATE, "🌐 Translate"),
        (TextTask.SENTIMENT, "🧠 Analyze Sentiment"),
        (TextTask.QA, "💬 Draft Answer"),
    ]
    for task, _ in buttons:
        board.register(task.value)
        board.set_input(task.value, text)

    columns = st.columns(len(buttons))
    for column, (task, label) in zip(columns, buttons):
        with column:
            if st.button(label, disabled=board.is_loading(task.value), width="stretch"):
                handler = functools.partial(
                    adapters.process_text_analysis, client, task=task, target_lang=target_lang
                )
                with st.spinner("Processing..."):
                    ui.run_invocations(board, {task.value: handler})
                st.rerun()

    for task, label in buttons:
        state = board.state(task.value)
        if state.status is not InvocationStatus.IDLE:
            st.markdown(f"##### {label}")
            _render_text_result(state)


def render_market(client):
    st.header("📈 Market Trends")
    st.caption("Structured market data generated on demand and charted.")

    board = ui.get_board("market_board")
    board.register("market")
    state = board.state("market")

    query = st.text_input("Market or metric", placeholder="EV sales by quarter, 2024")
    board.set_input("market", query)

    if st.button("📊 Generate Data", type="primary", disabled=state.is_loading):
        handler = functools.partial(adapters.generate_market_data, client)
        with st.spinner("Generating dataset..."):
            ui.run_invocations(board, {"market": handler})
        st.rerun()

    if state.status is InvocationStatus.ERROR:
        st.error(f"❌ {state.output}")
    elif state.status is InvocationStatus.SUCCESS:
        market = state.output
        st.info(market.summary)
        frame = market.to_frame()
        if frame.empty:
            st.warning("The model returned no data points.")
        else:
            st.bar_chart(frame, x="name", y="value")
            st.dataframe(frame, width="stretch", hide_index=True)


def _render_text_result(state):
    if state.status is InvocationStatus.ERROR:
        st.error(f"❌ {state.output}")
    elif state.status is InvocationStatus.SUCCESS:
        st.markdown(state.output)
