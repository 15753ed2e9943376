import logging

import streamlit as st
import pandas as pd

from keyword_traffic.buckets import BUCKET_LABELS, Bucket
from keyword_traffic.charts import distribution_chart, opportunity_chart, traffic_chart
from keyword_traffic.cohorts import Cohort, CohortRule, rule_from_row, rule_to_row, validate_rules
from keyword_traffic.config import (
    DEFAULT_MAX_POSITION,
    DEFAULT_MIN_SEARCH_VOLUME,
    DEFAULT_UPLIFT_CTR,
    AnalysisConfig,
    coerce_max_position,
    coerce_min_search_volume,
    coerce_percentage,
    coerce_uplift,
)
from keyword_traffic.ctr import DEFAULT_BUCKET_CTR, POSITION_CTR_SERIES, BucketCtrTable, PositionCtrTable, ctr_of
from keyword_traffic.errors import EmptyExportError, InputParseError
from keyword_traffic.export import (
    CSV_FILE_NAME,
    EXCEL_FILE_NAME,
    EXCEL_MIME,
    export_frame,
    to_csv_bytes,
    to_excel_bytes,
)
from keyword_traffic.ingest import load_keywords
from keyword_traffic.models import TransitionProbabilities
from keyword_traffic.pipeline import cohort_forecasts, project_cohorts, project_keywords
from keyword_traffic.summary import summarize

logging.basicConfig(format="%(asctime)s [%(levelname)s] %(message)s", level=logging.INFO)

DEFAULT_TRANSITIONS = TransitionProbabilities()

# Widget keys cleared by "Reset to Defaults"
PARAMETER_KEYS = [
    "min_search_volume",
    "max_position",
    "uplift_ctr",
    "ctr_variant",
    "bucket_ctr_editor",
    "position_ctr_editor",
    "p13",
    "p46",
    "p710",
    "pstay",
    "cohort_rules_editor",
]

BUCKET_BY_LABEL = {label: bucket for bucket, label in BUCKET_LABELS.items()}

RANGE_COLUMNS = ["position_from", "position_to", "kd_from", "kd_to"]


# --- Session Helpers ---
def reset_parameters():
    for key in PARAMETER_KEYS:
        st.session_state.pop(key, None)


def load_upload(uploaded_file):
    upload_id = (uploaded_file.name, uploaded_file.size)
    if st.session_state.get("upload_id") == upload_id:
        return

    try:
        records = load_keywords(uploaded_file, uploaded_file.name)
    except InputParseError as e:
        # Keep whatever was loaded before
        st.error(e.message)
        return

    st.session_state.records = records
    st.session_state.upload_id = upload_id


# --- Editor Tables -> Config ---
def bucket_ctr_table(edited):
    values = {}
    for _, row in edited.iterrows():
        values[BUCKET_BY_LABEL[row["Bucket"]]] = coerce_percentage(row["CTR (%)"])
    return BucketCtrTable(values)


def position_ctr_table(edited):
    values = {}
    for _, row in edited.iterrows():
        values[int(row["Position"])] = coerce_percentage(row["CTR (%)"])
    return PositionCtrTable(values)


def cohort_rules(edited):
    return tuple(rule_from_row(row) for row in edited.to_dict("records"))


# --- Streamlit App ---
st.title("📈 Keyword Traffic Opportunity Analyzer")
st.caption("Upload a keyword export and analyze traffic potential")

uploaded_file = st.file_uploader(
    "Upload your keyword export (SEMrush Organic Research XLSX or CSV)",
    type=["xlsx", "xls", "csv"],
)

if uploaded_file:
    load_upload(uploaded_file)

records = st.session_state.get("records", [])

if records:
    st.success(f"✅ Successfully loaded {len(records)} keywords")

    # --- Filters & Parameters ---
    header_col, reset_col = st.columns([4, 1])
    header_col.subheader("🔎 Filters & Parameters")
    reset_col.button("Reset to Defaults", on_click=reset_parameters)

    col1, col2, col3 = st.columns(3)
    min_search_volume = col1.text_input("Minimum Search Volume", value=str(DEFAULT_MIN_SEARCH_VOLUME), key="min_search_volume")
    max_position = col2.text_input("Maximum Position", value=str(DEFAULT_MAX_POSITION), key="max_position")
    uplift_ctr = col3.text_input("Uplift CTR (%)", value=str(int(DEFAULT_UPLIFT_CTR)), key="uplift_ctr")

    min_search_volume = coerce_min_search_volume(min_search_volume)
    max_position = coerce_max_position(max_position)
    uplift_ctr = coerce_uplift(uplift_ctr)

    # --- CTR Editor ---
    st.subheader("🎯 CTR Model (%)")
    ctr_variant = st.radio("CTR Granularity:", options=["By Bucket", "By Position"], horizontal=True, key="ctr_variant")

    if ctr_variant == "By Bucket":
        edited_ctr = st.data_editor(
            pd.DataFrame({
                "Bucket": list(BUCKET_LABELS.values()),
                "CTR (%)": [DEFAULT_BUCKET_CTR[b] for b in BUCKET_LABELS],
            }),
            disabled=["Bucket"],
            hide_index=True,
            key="bucket_ctr_editor",
        )
        ctr_table = bucket_ctr_table(edited_ctr)
    else:
        edited_ctr = st.data_editor(
            pd.DataFrame({
                "Position": list(POSITION_CTR_SERIES.keys()),
                "CTR (%)": list(POSITION_CTR_SERIES.values()),
            }),
            disabled=["Position"],
            hide_index=True,
            key="position_ctr_editor",
        )
        ctr_table = position_ctr_table(edited_ctr)
        st.caption("Positions beyond 20 use 0.1%.")

    effective = {BUCKET_LABELS[b]: round(ctr_of(b, ctr_table, uplift_ctr), 1) for b in Bucket}
    st.caption("Effective CTR with uplift: " + ", ".join(f"{k}: {v}%" for k, v in effective.items()))

    # --- Probability Matrix ---
    st.subheader("🎲 Transition Probabilities (%)")
    prob_cols = st.columns(5)
    p13 = prob_cols[0].number_input("P13", value=DEFAULT_TRANSITIONS.p13, step=0.1, key="p13")
    p46 = prob_cols[1].number_input("P46", value=DEFAULT_TRANSITIONS.p46, step=0.1, key="p46")
    p710 = prob_cols[2].number_input("P710", value=DEFAULT_TRANSITIONS.p710, step=0.1, key="p710")
    pstay = prob_cols[3].number_input("PSTAY", value=DEFAULT_TRANSITIONS.pstay, step=0.1, key="pstay")
    transitions = TransitionProbabilities(
        p13=coerce_percentage(p13),
        p46=coerce_percentage(p46),
        p710=coerce_percentage(p710),
        pstay=coerce_percentage(pstay),
    )
    prob_cols[4].metric("P1120 (derived)", f"{transitions.p1120:.1f}")

    if transitions.total > 100:
        st.warning(f"⚠️ Probabilities add up to {transitions.total:.1f}%, which is more than 100%.")

    # --- Cohort Rules ---
    st.subheader("🧩 Cohort Rules")
    st.caption("Rules are checked top to bottom; the first matching rule assigns the keyword.")
    edited_rules = st.data_editor(
        pd.DataFrame([rule_to_row(CohortRule())]).astype({col: float for col in RANGE_COLUMNS}),
        num_rows="dynamic",
        use_container_width=True,
        column_config={
            "prob_a": st.column_config.NumberColumn("Prob A", min_value=0.0, max_value=1.0, step=0.01),
            "prob_b": st.column_config.NumberColumn("Prob B", min_value=0.0, max_value=1.0, step=0.01),
            "prob_c": st.column_config.NumberColumn("Prob C", min_value=0.0, max_value=1.0, step=0.01),
            "cohort_override": st.column_config.SelectboxColumn("Override", options=[""] + [c.value for c in Cohort]),
        },
        key="cohort_rules_editor",
    )
    rules = cohort_rules(edited_rules)

    st.dataframe(
        pd.DataFrame({
            "Rule": [i + 1 for i in range(len(rules))],
            "Stays": [round(rule.residual, 2) for rule in rules],
            "Valid": ["✅" if rule.is_valid else "❌ A+B+C > 1" for rule in rules],
        }),
        hide_index=True,
    )
    if validate_rules(rules):
        st.error("Some cohort rules allocate more than 100% of probability. Their 'stays' share is set to 0.")

    config = AnalysisConfig(
        min_search_volume=min_search_volume,
        max_position=max_position,
        uplift_ctr=uplift_ctr,
        ctr_table=ctr_table,
        transitions=transitions,
        cohort_rules=rules,
    )

    projected = project_keywords(records, config)
    summary = summarize(projected)

    # --- Results ---
    st.subheader("📊 Analysis Results")
    metric_cols = st.columns(3)
    metric_cols[0].metric("Current Traffic", f"{round(summary.total_current_traffic):,}")
    metric_cols[1].metric("Expected Traffic", f"{round(summary.total_expected_traffic):,}")
    metric_cols[2].metric("Potential Gain", f"{round(summary.total_gain):,}")

    st.caption(f"Showing {summary.keyword_count} keywords (filtered from {len(records)} total)")

    if projected:
        results = export_frame(projected)
        gain_cols = [col for col in results.columns if col.startswith("Gain") or col == "Expected Gain"]
        styled_table = results.round(0).style.format(precision=0).background_gradient(cmap="RdYlGn", subset=gain_cols)
        st.dataframe(styled_table, use_container_width=True, hide_index=True)

        chart_col1, chart_col2 = st.columns(2)
        chart_col1.pyplot(traffic_chart(summary))
        chart_col2.pyplot(distribution_chart(summary))

        if summary.top_opportunities:
            st.subheader("🏆 Top Opportunities")
            st.dataframe(
                pd.DataFrame([{
                    "Keyword": o.keyword,
                    "Current": round(o.current),
                    "Potential": round(o.potential),
                    "Gain": round(o.gain),
                } for o in summary.top_opportunities]),
                use_container_width=True,
                hide_index=True,
            )
            st.pyplot(opportunity_chart(summary))

        # --- Cohort Forecast ---
        st.subheader("🧭 Cohort Forecast")
        assignments = project_cohorts(projected, config)
        forecasts = cohort_forecasts(projected, config)

        def cohort_label(assignment):
            if assignment is None:
                return "Unassigned"
            if assignment.is_override:
                return f"Cohort {assignment.cohort.value}"
            return f"Rule {assignment.rule_index + 1}" + ("" if assignment.valid else " (invalid)")

        st.dataframe(
            pd.DataFrame({
                "Keyword": [p.keyword for p in projected],
                "Position": [p.position for p in projected],
                "Assignment": [cohort_label(a) for a in assignments],
                "Current Traffic": [round(p.estimated_current_traffic) for p in projected],
                "Cohort Forecast": [round(f) for f in forecasts],
            }),
            use_container_width=True,
            hide_index=True,
        )

    # --- Export ---
    st.subheader("⬇️ Export")
    try:
        excel_data = to_excel_bytes(projected)
        csv_data = to_csv_bytes(projected)
    except EmptyExportError as e:
        st.warning(f"⚠️ {e.message}")
    else:
        export_col1, export_col2 = st.columns(2)
        export_col1.download_button(
            label="Export to Excel",
            data=excel_data,
            file_name=EXCEL_FILE_NAME,
            mime=EXCEL_MIME,
        )
        export_col2.download_button(
            label="Export to CSV",
            data=csv_data,
            file_name=CSV_FILE_NAME,
            mime="text/csv",
        )
