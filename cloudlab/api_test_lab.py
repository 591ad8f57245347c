import functools

import streamlit as st

import cloudlab.ui as ui
from cloudlab.catalog import API_CARDS
from cloudlab.image_input import image_from_upload

BOARD_KEY = "test_lab_board"
COLUMNS = 3


def _bind(card, client):
    return functools.partial(card.handler, client)


def _render_card(card, board, client):
    board.register(card.id, card.default_input)
    state = board.state(card.id)

    ui.render_card_header(card.icon, card.name, card.description)

    if card.is_image:
        uploaded = st.file_uploader(
            "Input (Upload)",
            type=["png", "jpg", "jpeg", "webp", "gif"],
            key=f"lab_file_{card.id}",
        )
        if uploaded is not None:
            board.set_input(card.id, image_from_upload(uploaded))
            st.caption("Image Selected")
    else:
        value = st.text_input("Input (Text/URL)", value=board.input_for(card.id), key=f"lab_input_{card.id}")
        board.set_input(card.id, value)

    ui.render_output(state)

    c_status, c_button = st.columns([1, 1])
    with c_status:
        ui.render_status_pill(state)
    with c_button:
        if st.button("▶ Run Test", key=f"lab_run_{card.id}", disabled=state.is_loading, width="stretch"):
            with st.spinner(f"Calling {card.name}..."):
                ui.run_invocations(board, {card.id: _bind(card, client)})
            st.rerun()


def render_api_test_lab(client):
    """
    Renders the API Test Lab: one card per simulated API, each with its own status.
    """
    st.header("🧪 API Test Lab")
    st.caption("Unified console to test all installed Google Cloud APIs.")

    board = ui.get_board(BOARD_KEY)

    if st.button("⚡ Run All Text APIs", type="primary"):
        jobs = {card.id: _bind(card, client) for card in API_CARDS if not card.is_image}
        with st.spinner(f"Running {len(jobs)} APIs in parallel..."):
            ui.run_invocations(board, jobs)
        st.rerun()

    for start in range(0, len(API_CARDS), COLUMNS):
        columns = st.columns(COLUMNS)
        for column, card in zip(columns, API_CARDS[start:start + COLUMNS]):
            with column:
                _render_card(card, board, client)
