import logging

import streamlit as st

from cloudlab.config import configure_logging, load_settings
from cloudlab.ai_engine import ModelClient
from cloudlab.catalog import API_CARDS
from cloudlab.errors import RequestFailed
from cloudlab.site_auditor import render_site_auditor
from cloudlab.studio import render_language, render_market, render_vision
from cloudlab.api_test_lab import render_api_test_lab
import cloudlab.ui as ui

# Load environment variables
settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("cloudlab.app")

# Page Config
st.set_page_config(
    page_title="Cloud API Lab",
    page_icon="🧪",
    layout="wide"
)

ui.setup_app_styling()

PAGES = ["Dashboard", "Vision", "Language", "Market Trends", "API Test Lab", "Site Auditor"]

with st.sidebar:
    st.markdown('<div class="lab-logo">Cloud API Lab</div>', unsafe_allow_html=True)
    selection = st.radio("Navigation", PAGES, label_visibility="collapsed")
    st.caption(f"Text model: `{settings.text_model}`")
    st.caption(f"Timeout: {settings.request_timeout:g}s")


def render_dashboard():
    st.header("🧪 Cloud API Lab")
    st.caption("Every tool here is a Gemini call with a different prompt, schema, or grounding tool.")

    c1, c2, c3 = st.columns(3)
    c1.metric("Simulated APIs", len(API_CARDS))
    c2.metric("Grounded APIs", sum(1 for c in API_CARDS if c.id in ("places", "search")))
    c3.metric("Audit Reports", 2)

    st.markdown("---")
    for card in API_CARDS:
        st.markdown(f"{card.icon} **{card.name}** · {card.description}")


if selection == "Dashboard":
    render_dashboard()
else:
    # Built per rerun and handed to the page; never stored globally
    try:
        client = ModelClient(settings)
    except RequestFailed as e:
        logger.error("Model client unavailable: %s", e)
        st.error(f"⚠️ {e} Set GEMINI_API_KEY in your environment or .env file.")
        st.stop()

    if selection == "Vision":
        render_vision(client)
    elif selection == "Language":
        render_language(client)
    elif selection == "Market Trends":
        render_market(client)
    elif selection == "API Test Lab":
        render_api_test_lab(client)
    elif selection == "Site Auditor":
        render_site_auditor(client)
