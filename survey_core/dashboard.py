"""Page payloads for the presentation layer (JSON-serializable dicts)."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from survey_core.charts import (
    category_bar,
    importance_scatter,
    org_donut,
    response_rate_bar,
    to_vega_spec,
)
from survey_core.config import LOW_RESPONSE_SHARE
from survey_core.filters import SurveyFilters, apply_filters, filter_options, normalize_filters
from survey_core.metrics_categories import (
    analyze_category,
    category_heatmap,
    category_scores,
    importance_matrix,
    question_stats,
    score_distribution,
    strengths,
    top_issues,
)
from survey_core.metrics_summary import (
    grouped_stats,
    respondent_distribution,
    response_rate_status,
    summary,
    team_stats,
)
from survey_core.quadrant import QUADRANTS, UNKNOWN_QUADRANT, classify
from survey_core.session import SurveySession


def prepare_context(filters: dict | SurveyFilters, session: SurveySession) -> Dict[str, Any]:
    schema = session.schema
    filt = filters if isinstance(filters, SurveyFilters) else normalize_filters(filters, schema=schema)
    return {
        "filters": filt,
        "schema": schema,
        "records": session.records,
        "filtered_records": apply_filters(session.records, filt),
        "filter_options": filter_options(session.records, schema),
        "validation": session.validation,
    }


def _alerts(total: int, incomplete: int) -> List[Dict[str, Any]]:
    alerts: List[Dict[str, Any]] = []
    if total and incomplete > total * LOW_RESPONSE_SHARE:
        alerts.append(
            {
                "alert_type": "Low response",
                "message": f"{incomplete} of {total} respondents have not completed the survey.",
                "action": "Send reminders to the pending respondents.",
            }
        )
    return alerts


def compute_overview(filters: SurveyFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    schema = ctx["schema"]
    records = ctx.get("filtered_records", [])

    summ = summary(records, schema)
    orgs = [asdict(g) for g in grouped_stats(records, schema.primary_group_column or "", schema)]
    for org in orgs:
        org["status"] = response_rate_status(org["response_rate"])
    teams = [asdict(g) for g in team_stats(records, schema)] if records else []

    charts: Dict[str, Any] = {}
    if orgs:
        org_df = pd.DataFrame(orgs)
        charts = {
            "org_distribution": to_vega_spec(org_donut(org_df)),
            "org_response_rate": to_vega_spec(response_rate_bar(org_df)),
        }

    return {
        "filters": asdict(filters),
        "kpis": {**asdict(summ), "status": response_rate_status(summ.response_rate)},
        "organizations": orgs,
        "teams": teams,
        "distributions": {dim: respondent_distribution(records, dim) for dim in schema.filter_columns},
        "filter_options": ctx.get("filter_options", {}),
        "charts": charts,
        "alerts": _alerts(summ.total_count, summ.incomplete_count),
    }


def compute_categories(filters: SurveyFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    schema = ctx["schema"]
    records = ctx.get("filtered_records", [])

    payload: Dict[str, Any] = {
        "filters": asdict(filters),
        "category_strategy": schema.category_strategy,
        "categories": [],
        "matrix": [],
        "quadrants": [asdict(q) for q in QUADRANTS],
        "importance_measured": False,
        "questions": [],
        "top_issues": [],
        "strengths": [],
        "score_distribution": score_distribution(records, schema),
        "heatmap": category_heatmap(records, schema),
        "charts": {},
    }
    if not records:
        return payload

    scores = category_scores(records, schema)
    matrix = []
    for point in importance_matrix(scores):
        quadrant = classify(point.y, point.x)
        matrix.append(
            {
                **asdict(point),
                "quadrant_key": quadrant.key,
                "quadrant": quadrant.name,
                "color": quadrant.color,
                "recommendation": quadrant.recommendation,
            }
        )
    questions = question_stats(records, schema)

    payload["categories"] = [asdict(s) for s in scores]
    payload["matrix"] = matrix
    payload["questions"] = [asdict(q) for q in questions]
    payload["top_issues"] = top_issues(questions, filters.top_n)
    payload["strengths"] = strengths(questions, filters.top_n)

    charts: Dict[str, Any] = {}
    if scores:
        charts["category_scores"] = to_vega_spec(category_bar(pd.DataFrame(payload["categories"]).drop(columns=["question_ids"])))
    plotted = [p for p in matrix if p["quadrant_key"] != UNKNOWN_QUADRANT.key]
    payload["importance_measured"] = bool(plotted)
    if plotted:
        charts["importance_matrix"] = to_vega_spec(importance_scatter(pd.DataFrame(plotted)))
    payload["charts"] = charts
    return payload


def compute_category_detail(ctx: Dict[str, Any], category: str) -> Optional[Dict[str, Any]]:
    analysis = analyze_category(ctx.get("filtered_records", []), category, ctx["schema"])
    return asdict(analysis) if analysis is not None else None
