"""
Customer Feedback Dashboard: NPS, CSAT and AI insights from the survey sheet.
Run with: streamlit run nps_dashboard/dashboard.py
"""

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from html import escape

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nps_dashboard.config import LANGUAGES
from nps_dashboard.flow import AnalysisSession, DashboardState
from nps_dashboard.i18n import translate
from nps_dashboard.logging_config import setup_logging
from nps_dashboard.models import records_to_frame

setup_logging()

# ============================================================
# PAGE CONFIG
# ============================================================
st.set_page_config(
    page_title="Customer Feedback Dashboard",
    page_icon="◆",
    layout="wide",
)

# ============================================================
# STYLING
# ============================================================
CUSTOM_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');
html, body, [class*="css"] { font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif; }

footer {visibility: hidden;}
#MainMenu {visibility: hidden;}

:root {
    --primary: #024675;
    --accent: #d97757;
    --accent-hover: #e8895f;
    --border: rgba(2,70,117,0.12);
}

[data-testid="stMetric"] {
    border: 1px solid var(--border); border-radius: 14px;
    padding: 18px 22px; box-shadow: 0 2px 12px rgba(0,0,0,0.06);
}
[data-testid="stMetric"] label {
    font-weight: 500; font-size: 0.72rem;
    text-transform: uppercase; letter-spacing: 0.06em;
}

.stButton > button { border-radius: 10px; font-weight: 600; transition: all 0.15s ease; }
.stButton > button[kind="primary"] { background: var(--accent) !important; color: #fff !important; border: none; }
.stButton > button[kind="primary"]:hover { background: var(--accent-hover) !important; }

.highlight-card {
    background: #f0fdf4; border: 1px solid #bbf7d0; border-radius: 10px;
    padding: 14px 16px; height: 100%;
}
.highlight-card blockquote {
    font-style: italic; color: #166534; border-left: 4px solid #4ade80;
    padding-left: 10px; margin: 0 0 8px;
}
.suggestion-card {
    background: #f9fafb; border: 1px solid #e5e7eb; border-radius: 10px;
    padding: 10px 14px; margin-bottom: 10px;
}
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

COLORS = {
    "positive": "#22c55e",
    "neutral": "#f59e0b",
    "negative": "#ef4444",
}
CSAT_COLORS = ["#024675", "#3b82f6", "#60a5fa"]


def apply_chart_style(fig):
    fig.update_layout(
        font=dict(family="Inter, sans-serif", color="#31353D"),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        title_font=dict(size=14),
        legend=dict(font=dict(size=11)),
        margin=dict(l=20, r=20, t=45, b=20),
    )
    return fig


def nps_color(score: int) -> str:
    """Green above 50, amber above 0, red otherwise."""
    if score > 50:
        return COLORS["positive"]
    if score > 0:
        return COLORS["neutral"]
    return COLORS["negative"]


# ============================================================
# SESSION
# ============================================================
def _get_session() -> AnalysisSession:
    """One AnalysisSession per browser session, kept across reruns."""
    if "analysis_session" not in st.session_state:
        st.session_state.analysis_session = AnalysisSession()
    return st.session_state.analysis_session


# ============================================================
# HEADER + CONTROLS
# ============================================================
def render_header(state: DashboardState, t) -> str:
    c1, c2 = st.columns([5, 1])
    with c1:
        st.markdown(f"""
        <div style="display:flex; align-items:center; gap:10px; margin-bottom:0.2rem;">
            <span style="font-size:1.5rem; color:#d97757;">◆</span>
            <span style="font-size:1.5rem; font-weight:700; color:#024675;">{t("appTitle")}</span>
        </div>
        <p style="color:#6b7280; margin-top:0;">{t("appSubtitle")}</p>""", unsafe_allow_html=True)
    with c2:
        tags = list(LANGUAGES)
        language = st.selectbox(
            t("language"), tags,
            index=tags.index(state.language),
            format_func=lambda tag: tag.upper(),
            disabled=state.is_loading,
            key="language_select",
        )
    return language


def render_data_source(state: DashboardState, t):
    """Date pickers + the single analyze/refresh button. Returns (clicked, start, end)."""
    st.markdown(f"### {t('dataSourceTitle')}")
    st.caption(t("dataSourceSubtitle"))

    st.markdown(f"**{t('filterByDateTitle')}**")
    c1, c2 = st.columns(2)
    with c1:
        start = st.date_input(t("startDate"), value=None, key="start_date",
                              format="DD/MM/YYYY", disabled=state.is_loading)
    with c2:
        end = st.date_input(t("endDate"), value=None, key="end_date",
                            format="DD/MM/YYYY", disabled=state.is_loading)

    label = ("🔄 " if state.has_loaded else "⚡ ") + t(state.button_label_key)
    clicked = st.button(label, type="primary", use_container_width=True,
                        disabled=state.is_loading, key="btn_analyze")
    return clicked, start, end


# ============================================================
# CHARTS
# ============================================================
def chart_nps_gauge(state: DashboardState, t):
    nps = state.metrics.nps
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=nps.score,
        number=dict(font=dict(size=44)),
        gauge=dict(
            axis=dict(range=[-100, 100]),
            bar=dict(color=nps_color(nps.score), thickness=0.35),
            bgcolor="#e5e7eb",
            borderwidth=0,
        ),
    ))
    fig.update_layout(title=t("npsTitle"), height=260)
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric(t("promoters"), nps.promoters)
    m2.metric(t("passives"), nps.passives)
    m3.metric(t("detractors"), nps.detractors)
    m4.metric(t("respondents"), nps.total)


def chart_csat(state: DashboardState, t):
    csat = state.metrics.csat
    df = pd.DataFrame({
        "category": [t("csatService"), t("csatDelivery"), t("csatPlatform")],
        "value": [csat.service, csat.delivery, csat.platform],
    })
    fig = px.bar(df, x="value", y="category", orientation="h",
                 color="category", color_discrete_sequence=CSAT_COLORS,
                 text=df["value"].map(lambda v: f"{v}%"))
    fig.update_traces(textposition="outside", showlegend=False)
    fig.update_layout(title=t("csatTitle"), height=260, xaxis_range=[0, 110],
                      xaxis_title="", yaxis_title="", xaxis_ticksuffix="%")
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)
    st.caption(t("csatDescription"))


def chart_sentiment(state: DashboardState, t):
    s = state.sentiment
    fig = go.Figure(go.Pie(
        labels=[t("positive"), t("neutral"), t("negative")],
        values=[s.positive, s.neutral, s.negative],
        marker=dict(colors=[COLORS["positive"], COLORS["neutral"], COLORS["negative"]]),
        textinfo="percent", sort=False,
    ))
    fig.update_layout(height=300, legend=dict(orientation="h", y=-0.1))
    apply_chart_style(fig)
    st.plotly_chart(fig, use_container_width=True)


# ============================================================
# AI SECTIONS
# ============================================================
def render_suggestions(state: DashboardState, t):
    if not state.suggestions:
        st.caption(t("noSuggestions"))
        return
    for item in state.suggestions:
        st.markdown(f"""
        <div class="suggestion-card">
            <p style="color:#4b5563; margin:0 0 4px;"><strong>{t("originalCommentLabel")}:</strong>
               "{escape(item.original_comment)}"</p>
            <p style="color:#024675; font-weight:500; margin:0; padding-left:8px;
                      border-left:2px solid #d97757;">{escape(item.suggestion)}</p>
        </div>""", unsafe_allow_html=True)


def render_highlights(state: DashboardState, t):
    st.markdown(f"### 👍 {t('whatWeDidWellTitle')}")
    st.caption(t("whatWeDidWellDescription"))
    cols = st.columns(len(state.highlights))
    for col, item in zip(cols, state.highlights):
        with col:
            st.markdown(f"""
            <div class="highlight-card">
                <blockquote>"{escape(item.positive_comment)}"</blockquote>
                <p style="color:#15803d; font-weight:600; text-align:right; margin:0 0 6px;">NPS: {item.nps_score}</p>
                <p style="color:#16a34a; font-size:0.8rem; margin:0;">{escape(item.reason)}</p>
            </div>""", unsafe_allow_html=True)


# ============================================================
# MAIN DASHBOARD
# ============================================================
def render_dashboard(state: DashboardState, t):
    # ---- Section 1: Metrics ----
    st.markdown(f"### {t('metricsTitle')}")
    st.caption(t("npsDescription"))
    c1, c2 = st.columns(2)
    with c1:
        chart_nps_gauge(state, t)
    with c2:
        chart_csat(state, t)

    # Metrics survive an AI failure; the AI sections only render once they exist
    if state.sentiment is not None:
        st.markdown("---")

        # ---- Section 2: Sentiment + suggestions ----
        c1, c2 = st.columns([1, 2])
        with c1:
            st.markdown(f"### {t('sentimentTitle')}")
            st.caption(t("sentimentDescription"))
            chart_sentiment(state, t)
        with c2:
            st.markdown(f"### {t('suggestionsTitle')}")
            st.caption(t("suggestionsDescription"))
            render_suggestions(state, t)

        # ---- Section 3: What we did well ----
        if state.highlights:
            st.markdown("---")
            render_highlights(state, t)

    # ---- Section 4: Raw responses ----
    st.markdown("---")
    with st.expander(f"{t('rawDataTitle')} ({len(state.records):,})"):
        st.dataframe(records_to_frame(state.records), use_container_width=True, hide_index=True)


# ============================================================
# MAIN
# ============================================================
def main():
    session = _get_session()
    state = session.state

    def t(key):
        return translate(state.language, key)

    language = render_header(state, t)
    if language != state.language:
        with st.spinner(t("analyzing")):
            session.change_language(language)
        st.rerun()

    st.markdown("---")
    clicked, start, end = render_data_source(state, t)
    if clicked:
        with st.spinner(t("loading")):
            session.analyze(start, end)
        st.rerun()  # refresh the button label and results

    if state.error_message:
        st.error(f"**{t('errorTitle')}** {state.error_message}")

    if state.metrics is not None:
        st.markdown("---")
        render_dashboard(state, t)


if __name__ == "__main__":
    main()
