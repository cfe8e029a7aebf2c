import asyncio
import logging
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from survey_core.dashboard import (
    compute_categories,
    compute_category_detail,
    compute_overview,
    prepare_context,
)
from survey_core.session import UploadTracker

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(selections: dict) -> str:
    chips = [f"{dim}: {value}" for dim, value in selections.items()] or ["All respondents"]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def get_tracker() -> UploadTracker:
    if "tracker" not in st.session_state:
        st.session_state["tracker"] = UploadTracker()
    return st.session_state["tracker"]


# ---------- UI setup ----------
st.set_page_config(page_title="Culture Survey Dashboard", layout="wide")
inject_base_styles()
st.title("Organizational Culture Survey")
st.caption("Response status and category scores from the LMS survey export.")

tracker = get_tracker()

with st.sidebar:
    st.markdown("### Upload")
    uploaded = st.file_uploader("Survey export (.xlsx)", type=["xlsx"], key=tracker.widget_key)
    if uploaded is not None and st.session_state.get("_uploaded_id") != uploaded.file_id:
        st.session_state["_uploaded_id"] = uploaded.file_id
        token = tracker.begin()
        outcome = asyncio.run(tracker.load(token, uploaded.getvalue(), uploaded.name))
        if outcome.error:
            st.session_state["_upload_error"] = outcome.error
        else:
            st.session_state.pop("_upload_error", None)
    if st.button("Reset"):
        tracker.reset()
        st.session_state.pop("_uploaded_id", None)
        st.session_state.pop("_upload_error", None)
        st.rerun()

if st.session_state.get("_upload_error"):
    st.error(st.session_state["_upload_error"])

session = tracker.current
if session is None:
    st.info("Upload an LMS survey export to start.")
    st.stop()

if not session.validation.is_valid:
    for msg in session.validation.errors:
        st.error(msg)
    st.stop()
for msg in session.validation.warnings:
    st.warning(msg)

# ----- Sidebar: navigation + filters -----
with st.sidebar:
    st.markdown("---")
    nav_choice = st.radio("Navigate", ["Response Status", "Category Analysis"], index=0)
    st.markdown("### Filters")
    options = prepare_context({}, session)["filter_options"]
    selections = {}
    for dim, values in options.items():
        if not values:
            continue
        choice = st.selectbox(dim, ["All"] + values, key=f"filter_{dim}")
        selections[dim] = choice
    top_n = st.slider("Top N questions", min_value=1, max_value=10, value=3)

ctx = prepare_context({"selections": selections, "top_n": top_n}, session)
filters = ctx["filters"]
filter_summary_html = format_filter_summary(filters.selections)


def render_overview_page():
    payload = compute_overview(filters, ctx)
    render_page_header(
        "Response Status",
        "Home / Response Status",
        filter_summary_html,
        export_df=pd.DataFrame(payload["teams"]),
        export_name="team_response.csv",
    )
    kpis = payload["kpis"]
    cols = st.columns(4)
    cols[0].metric("Response rate", f"{kpis['response_rate']}%", help=f"{kpis['completed_count']} / {kpis['total_count']}")
    cols[1].metric("Completed", kpis["completed_count"])
    cols[2].metric("Not completed", kpis["incomplete_count"])
    cols[3].metric("Average score", f"{kpis['avg_score']:.1f}")

    for alert in payload["alerts"]:
        st.warning(f"**{alert['alert_type']}**: {alert['message']}  \nAction: {alert['action']}")

    charts = payload["charts"]
    if charts:
        left, right = st.columns(2)
        with left:
            with card("Respondents by organization"):
                st.vega_lite_chart(charts["org_distribution"], use_container_width=True)
        with right:
            with card("Response rate by organization"):
                st.vega_lite_chart(charts["org_response_rate"], use_container_width=True)

    with card("Response status by team"):
        if payload["teams"]:
            st.dataframe(pd.DataFrame(payload["teams"]), use_container_width=True, hide_index=True)
        else:
            st.info("No respondents match the current filters.")


def render_categories_page():
    payload = compute_categories(filters, ctx)
    render_page_header(
        "Category Analysis",
        "Home / Category Analysis",
        filter_summary_html,
        export_df=pd.DataFrame(payload["questions"]),
        export_name="question_scores.csv",
    )
    grouping = "question-code ranges" if payload["category_strategy"] == "numeric" else "column prefixes"
    st.caption(f"Categories grouped by {grouping}.")
    charts = payload["charts"]
    left, right = st.columns(2)
    with left:
        with card("Category scores"):
            if "category_scores" in charts:
                st.vega_lite_chart(charts["category_scores"], use_container_width=True)
            else:
                st.info("No category scores for the current filters.")
    with right:
        with card("Importance × satisfaction"):
            if payload["importance_measured"]:
                st.vega_lite_chart(charts["importance_matrix"], use_container_width=True)
            else:
                st.info("Importance was not measured in this survey, so categories are not placed in quadrants.")

    with card("Quadrants"):
        qcols = st.columns(len(payload["quadrants"]))
        for col, quad in zip(qcols, payload["quadrants"]):
            col.markdown(f"**{quad['name']}**  \n{quad['recommendation']}")

    heat = payload["heatmap"]
    if heat["rows"]:
        with card("Category scores by organization"):
            table = pd.DataFrame([{"category": r["category"], **r["scores"]} for r in heat["rows"]])
            st.dataframe(table, use_container_width=True, hide_index=True)

    issue_col, strength_col = st.columns(2)
    with issue_col:
        with card("Lowest-scoring questions"):
            st.dataframe(pd.DataFrame(payload["top_issues"]), use_container_width=True, hide_index=True)
    with strength_col:
        with card("Highest-scoring questions"):
            st.dataframe(pd.DataFrame(payload["strengths"]), use_container_width=True, hide_index=True)

    categories = [c["category"] for c in payload["categories"]]
    if categories:
        with card("Category detail"):
            selected = st.selectbox("Category", categories)
            detail = compute_category_detail(ctx, selected)
            if detail is not None:
                dcols = st.columns(4)
                dcols[0].metric("Satisfaction", f"{detail['satisfaction']:.1f}")
                dcols[1].metric("Importance", "n/a" if detail["importance"] is None else f"{detail['importance']:.1f}")
                dcols[2].metric("Std. dev.", f"{detail['std_dev']:.1f}")
                dcols[3].metric("Gap to target", f"{detail['improvement_potential']:.1f}")
                st.markdown(f"**{detail['quadrant']}**: {detail['recommendation']}")
                st.dataframe(pd.DataFrame(detail["department_comparison"]), use_container_width=True, hide_index=True)


if nav_choice == "Response Status":
    render_overview_page()
else:
    render_categories_page()
