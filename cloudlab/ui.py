import asyncio
import html

import streamlit as st

from cloudlab.invocation import InvocationBoard, InvocationStatus
from cloudlab.reports import status_tone

_STATUS_DOTS = {
    InvocationStatus.IDLE: "#475569",
    InvocationStatus.LOADING: "#3b82f6",
    InvocationStatus.SUCCESS: "#10b981",
    InvocationStatus.ERROR: "#ef4444",
}


def setup_app_styling():
    """
    Injects global CSS for the Cloud API Lab.
    Theme: Slate Console (Dark Sidebar, Dark Cards, Blue/Emerald Accents)
    """
    st.markdown("""
    <style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');

    :root {
        --primary: #0f172a; /* Slate 900 */
        --accent: #3b82f6; /* Blue 500 */
        --accent-glow: rgba(59, 130, 246, 0.15);
        --bg-sidebar: #020617; /* Slate 950 */
        --bg-card: #0b1222;
        --text-muted: #94a3b8;
        --border-dark: #1e293b;
    }

    html, body, [class*="css"] {
        font-family: 'Inter', sans-serif !important;
    }

    [data-testid="stSidebar"] {
        background-color: var(--bg-sidebar);
        border-right: 1px solid var(--border-dark);
    }
    [data-testid="stSidebar"] p, [data-testid="stSidebar"] span, [data-testid="stSidebar"] label {
        color: #cbd5e1 !important;
    }

    .lab-logo {
        font-weight: 800;
        font-size: 2rem;
        background: linear-gradient(135deg, #ffffff 0%, #60a5fa 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        margin-bottom: 2rem;
        padding-left: 0.5rem;
    }

    /* API CARDS */
    .api-card {
        background: var(--bg-card);
        border: 1px solid var(--border-dark);
        border-radius: 12px;
        padding: 1.25rem;
        margin-bottom: 0.75rem;
        color: #e2e8f0;
    }
    .api-card h4 { margin: 0 0 0.4rem 0; color: #e2e8f0 !important; font-size: 1rem; }
    .api-card p { color: var(--text-muted); font-size: 0.8rem; margin: 0; min-height: 2rem; }

    .status-pill {
        display: inline-flex;
        align-items: center;
        gap: 0.4rem;
        font-size: 0.75rem;
        color: var(--text-muted);
    }
    .status-dot { width: 8px; height: 8px; border-radius: 50%; display: inline-block; }

    .api-output {
        background: #0f172a;
        border: 1px solid var(--border-dark);
        border-radius: 8px;
        padding: 0.75rem;
        font-family: ui-monospace, monospace;
        font-size: 0.75rem;
        color: #cbd5e1;
        white-space: pre-wrap;
        max-height: 12rem;
        overflow: auto;
    }
    .api-output.error { background: rgba(127, 29, 29, 0.3); border-color: #7f1d1d; color: #fca5a5; }

    /* REPORT CARDS */
    .report-card {
        background: var(--bg-card);
        border: 1px solid var(--border-dark);
        border-top: 4px solid var(--accent);
        border-radius: 12px;
        padding: 1.5rem;
        margin-bottom: 1rem;
        color: #e2e8f0;
    }
    .tone-good { color: #34d399; border-color: #065f46 !important; }
    .tone-neutral { color: #60a5fa; border-color: #1e40af !important; }
    .tone-bad { color: #f87171; border-color: #991b1b !important; }
    .tone-unknown { color: #94a3b8; }

    .health-score {
        font-size: 4rem;
        font-weight: 800;
        letter-spacing: -0.05em;
        text-align: center;
        margin: 0;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    </style>
    """, unsafe_allow_html=True)


def status_label(state):
    if state.status is InvocationStatus.IDLE:
        return "Ready"
    return state.status.value


def render_status_pill(state):
    color = _STATUS_DOTS[state.status]
    st.markdown(
        f'<span class="status-pill"><span class="status-dot" style="background:{color}"></span>'
        f'{status_label(state)}</span>',
        unsafe_allow_html=True,
    )


def render_output(state):
    """
    Output box for a card. Nothing is shown until the first run.
    """
    if state.status is InvocationStatus.IDLE:
        return
    if state.status is InvocationStatus.LOADING:
        st.caption("⏳ Running...")
        return
    css = "api-output error" if state.status is InvocationStatus.ERROR else "api-output"
    st.markdown(f'<div class="{css}">{html.escape(str(state.output))}</div>', unsafe_allow_html=True)


def render_card_header(icon, name, description):
    st.markdown(
        f'<div class="api-card"><h4>{icon} {html.escape(name)}</h4><p>{html.escape(description)}</p></div>',
        unsafe_allow_html=True,
    )


def render_score_card(label, score, status=None, body=""):
    tone = status_tone(status)
    status_html = f'<span class="tone-{tone}">{html.escape(str(status))}</span>' if status else ""
    st.markdown(f"""
    <div class="report-card tone-{tone}">
        <div style="display:flex; justify-content:space-between; align-items:center;">
            <strong>{html.escape(label)}</strong>{status_html}
        </div>
        <div style="font-size:2rem; font-weight:700;">{score:g}</div>
        <div style="color:#cbd5e1; font-size:0.9rem;">{html.escape(body)}</div>
    </div>
    """, unsafe_allow_html=True)


def get_board(key):
    """
    The InvocationBoard for one page, kept across Streamlit reruns.
    """
    if key not in st.session_state:
        st.session_state[key] = InvocationBoard()
    return st.session_state[key]


def run_invocations(board, jobs):
    """
    Runs {unit_id: handler} on one event loop and waits for all of them.
    Each unit settles independently; one failure never touches another unit.
    """
    async def _run_all():
        await asyncio.gather(*(board.run_test(unit_id, handler) for unit_id, handler in jobs.items()))

    asyncio.run(_run_all())
