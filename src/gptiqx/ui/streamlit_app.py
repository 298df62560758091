"""Streamlit UI for GPTIQX."""

import streamlit as st
import logging
from pathlib import Path

import pandas as pd

# Add parent directory to path for imports
import sys
sys.path.append(str(Path(__file__).parent.parent.parent))

from gptiqx.core.config import settings
from gptiqx.core.insights import (
    select_insights, select_primary_insight, summarize_status, select_focus_area,
)
from gptiqx.core.metrics import METRIC_NAMES, load_metric_definitions
from gptiqx.core.models import InsightKind, TrendDelta
from gptiqx.core.trends import (
    weekly_trends, filter_by_range, best_session_index, learning_timeline, chart_rows,
)
from gptiqx.services.history import ConversationHistory
from gptiqx.services.llm import ScoringServiceFactory, AnalysisError
from gptiqx.utils.data_prep import conversation_to_csv, export_filename

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

INSIGHT_STYLES = {
    InsightKind.POSITIVE: st.success,
    InsightKind.NEGATIVE: st.error,
    InsightKind.NEUTRAL: st.info,
    InsightKind.INFO: st.info,
    InsightKind.WARNING: st.warning,
}


# Page configuration
st.set_page_config(
    page_title="GPTIQX — Conversation Intelligence",
    page_icon="🧠",
    layout="wide"
)

# Initialize services
scoring_service = ScoringServiceFactory.create()
history = ConversationHistory()

st.title("🧠 GPTIQX — Conversation Intelligence")
st.write("Paste an AI conversation to score your prompting (UserIQ), the model's answers (GPTIQ) "
         "and the dialogue as a whole (ConversationIQ).")

# Sidebar: history
with st.sidebar:
    st.header("🕘 Learning Timeline")
    search = st.text_input("Search conversations", value="")
    for conv in history.search(search):
        st.write(f"**{conv.title}** · {conv.created_at:%b %d}")
        st.caption(f"UserIQ {conv.scores.user_iq} · GPTIQ {conv.scores.gpt_iq} · "
                   f"ConversationIQ {conv.scores.conversation_iq}")
        col1, col2 = st.columns(2)
        with col1:
            st.download_button("CSV", conversation_to_csv(conv), file_name=export_filename(conv.title, "csv"),
                               mime="text/csv", key=f"csv_{conv.id}")
        with col2:
            if st.button("Delete", key=f"del_{conv.id}"):
                history.delete(conv.id)
                st.rerun()

# Analyze
transcript = st.text_area("Conversation transcript", height=180,
                          placeholder="Paste your conversation transcript here...")
title = st.text_input("Title", value="New Analysis")

if st.button("✨ Analyze Conversation", width='stretch'):
    try:
        with st.spinner("Analyzing..."):
            scores = scoring_service.analyze(transcript)
            history.add(transcript, scores, title=title or "New Analysis")
        st.success("Your conversation has been analyzed successfully")
    except AnalysisError as e:
        logger.error(f"Analysis failed: {e.message}")
        st.error(e.message)

conversations = history.list()
latest = conversations[-1] if conversations else None
scores = latest.scores if latest else None

# Scores
if scores:
    st.subheader("Latest Scores")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("UserIQ", scores.user_iq)
    with col2:
        st.metric("GPTIQ", scores.gpt_iq)
    with col3:
        st.metric("ConversationIQ", scores.conversation_iq)
    st.caption(summarize_status(scores))

    if scores.justification:
        with st.expander("Analysis Summary"):
            st.write(scores.justification)

# Primary insight and focus
if scores:
    primary = select_primary_insight(scores)
    focus = select_focus_area(scores)
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("💡 Your Next Improvement")
        st.caption(f"{primary.confidence.value} confidence")
        st.write(f"**{primary.problem}**")
        st.write(f"*Why:* {primary.reason}")
        st.write(f"*Do this:* {primary.action}")
        if len(conversations) >= 3 and not settings.pro_features:
            st.info("Pro: See patterns across sessions, improvement predictions, and personalized roadmaps")
    with col2:
        st.subheader("🎯 Current Improvement Focus")
        st.write(f"**{focus.name}**")
        st.write(focus.description)
        st.caption(f"Improving this could raise your ConversationIQ by ~{focus.impact_range} points")
else:
    st.subheader("💡 What should you improve?")
    st.write("Analyze your first conversation to get personalized guidance on improving your AI interactions.")

# Insights
st.subheader("📌 Insights")
if latest:
    trends = weekly_trends(conversations)
    user_trend, gpt_trend, conv_trend = trends["user_iq"], trends["gpt_iq"], trends["conversation_iq"]
else:
    user_trend = gpt_trend = conv_trend = TrendDelta.empty()

for insight in select_insights(scores, user_trend, gpt_trend, conv_trend, len(conversations)):
    text = f"**{insight.title}**  \n{insight.description}"
    if insight.recommendation:
        text += f"  \n✅ {insight.recommendation}"
    INSIGHT_STYLES[insight.kind](text)

# Metric explainers
definitions = load_metric_definitions()
cols = st.columns(len(METRIC_NAMES))
for col, name in zip(cols, METRIC_NAMES):
    definition = definitions[name]
    with col:
        with st.expander(f"How is {definition.title} calculated?"):
            st.write(f"**Definition.** {definition.definition}")
            st.write(f"**Methodology.** {definition.methodology}")
            for factor in definition.factors:
                st.write(f"- **{factor.name}** ({factor.weight}): {factor.description}")

# Progress
st.subheader("📈 Your Intelligence Progress")
if conversations:
    labels = {"7 Days": "7d", "30 Days": "30d", "All Time": "all"}
    choice = st.radio("Range", list(labels), index=2, horizontal=True)
    in_range = filter_by_range(conversations, labels[choice])
    if in_range:
        df = pd.DataFrame(chart_rows(in_range))
        st.line_chart(df, x="date", y=["UserIQ", "GPTIQ", "ConversationIQ"])
        best = in_range[best_session_index(in_range)]
        st.caption(f"Best session: {best.title} ({best.created_at:%b %d, %Y})")
    else:
        st.info("No conversations in this range.")

    st.subheader("📚 Recent Takeaways")
    for conv, takeaway in learning_timeline(conversations):
        s = conv.scores
        st.write(f"**{conv.title}** · {conv.created_at:%b %d} · "
                 f"{s.user_iq} / {s.gpt_iq} / {s.conversation_iq}")
        st.caption(takeaway)
else:
    st.info("Analyze conversations to see your intelligence progress over time")
