"""Training Plan Export — Streamlit download page.

Run with:
    streamlit run streamlit_app/app.py

Upload a training-plan JSON (and optionally athlete settings), preview any
workout's power profile, then download it as ZWO / FIT / MRC / ERG, the
whole plan as a ZIP per format, or the plan calendar as .ics.
"""

from __future__ import annotations

import streamlit as st

from workout_codec.exceptions import WorkoutExportError
from workout_codec.exporter import (
    export_all_workouts,
    export_plan_calendar,
    export_workout,
    supported_formats,
)
from workout_codec.math.profile import average_intensity, minutes_by_phase, power_profile
from workout_codec.models.enums import ExportFormat
from workout_codec.workout_builder.description_builder import format_duration, sport_icon
from workout_codec.workout_builder.simple_profile import structure_for
from workout_codec.workout_builder.walker import walk_structure

from helpers import (
    FORMAT_LABELS,
    STEP_COLORS,
    parse_plan,
    parse_settings,
    settings_with_overrides,
    steps_table,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Training Plan Export",
    page_icon="🚴",
    layout="wide",
)


def _render_download(result, key: str) -> None:
    """Download button for a successful ExportResult, error box otherwise."""
    if not result.success:
        st.error(result.error)
        return
    artifact = result.artifact
    st.download_button(
        f"Download {artifact.filename}",
        data=artifact.as_bytes(),
        file_name=artifact.filename,
        mime=artifact.media_type,
        key=key,
    )


def _render_step_bars(timeline) -> None:
    """Color-coded bars, one per flattened step."""
    for timed in timeline:
        color = STEP_COLORS.get(timed.step.kind, "#CCCCCC")
        label = timed.step.name or timed.step.kind.value.title()
        st.markdown(
            f'<div style="background:{color};padding:6px 12px;'
            f'border-radius:4px;margin:2px 0;width:100%;">'
            f"<strong>{label}</strong> | {format_duration(timed.duration_minutes) or '<1m'}"
            f"</div>",
            unsafe_allow_html=True,
        )


# ---------------------------------------------------------------------------
# Sidebar inputs
# ---------------------------------------------------------------------------

st.sidebar.title("Inputs")
plan_file = st.sidebar.file_uploader("Training plan (.json)", type=["json"])
settings_file = st.sidebar.file_uploader("Athlete settings (.json, optional)", type=["json"])

with st.sidebar.expander("Threshold overrides"):
    ftp_override = st.number_input("FTP (W)", min_value=0, max_value=2000, value=0, step=5)
    bike_lthr_override = st.number_input("Bike LTHR (bpm)", min_value=0, max_value=250, value=0)
    run_lthr_override = st.number_input("Run LTHR (bpm)", min_value=0, max_value=250, value=0)

st.title("Training Plan Export")

if plan_file is None:
    st.info("Upload a training plan JSON in the sidebar to get started.")
    st.stop()

try:
    plan = parse_plan(plan_file.getvalue())
    settings = parse_settings(settings_file.getvalue() if settings_file else None)
except (WorkoutExportError, ValueError) as e:
    st.error(f"Could not read input: {e}")
    st.stop()

settings = settings_with_overrides(
    settings, int(ftp_override), int(bike_lthr_override), int(run_lthr_override),
)

mc1, mc2, mc3 = st.columns(3)
mc1.metric("Event", plan.meta.event or "--")
mc2.metric("Event Date", plan.meta.event_date.isoformat() if plan.meta.event_date else "--")
mc3.metric("Workouts", str(plan.workout_count))

tab_workout, tab_plan = st.tabs(["Single Workout", "Whole Plan"])

# ---------------------------------------------------------------------------
# Tab 1: single workout preview + downloads
# ---------------------------------------------------------------------------

with tab_workout:
    entries = list(plan.iter_workouts())
    if not entries:
        st.info("This plan has no workouts.")
    else:
        labels = [
            f"{day.date.isoformat()}  {sport_icon(w.sport)} {w.name or w.id}" for day, w in entries
        ]
        choice = st.selectbox("Workout", range(len(entries)), format_func=lambda i: labels[i])
        _, workout = entries[choice]

        if workout.description:
            st.markdown(workout.description)

        try:
            timeline = walk_structure(structure_for(workout), settings.speed_kmh(workout.sport))
        except WorkoutExportError as e:
            st.warning(f"Cannot preview this workout: {e}")
            timeline = ()

        if timeline:
            wc1, wc2, wc3 = st.columns(3)
            wc1.metric("Duration", format_duration(timeline[-1].end_minutes))
            wc2.metric("Avg Target", f"{average_intensity(timeline):.0f}% FTP")
            wc3.metric("Steps", str(len(timeline)))

            frame = power_profile(timeline)
            st.subheader("Power Profile")
            st.line_chart(frame, x="minute", y="percent_ftp")
            st.bar_chart(minutes_by_phase(timeline))

            st.subheader("Workout Steps")
            _render_step_bars(timeline)
            with st.expander("Step table"):
                st.dataframe(steps_table(timeline), use_container_width=True)

        st.divider()
        formats = supported_formats(workout.sport)
        if not formats:
            st.info(f"No workout file formats for {workout.sport.value} workouts.")
        cols = st.columns(max(len(formats), 1))
        for col, fmt in zip(cols, formats):
            with col:
                st.caption(FORMAT_LABELS[fmt.value])
                _render_download(export_workout(workout, fmt, settings), key=f"dl_{fmt.value}_{choice}")

# ---------------------------------------------------------------------------
# Tab 2: whole-plan archives + calendar
# ---------------------------------------------------------------------------

with tab_plan:
    st.subheader("Calendar")
    _render_download(export_plan_calendar(plan), key="dl_ics")

    st.subheader("All Workouts")
    batch_format = st.selectbox(
        "Format",
        [ExportFormat.ZWO, ExportFormat.FIT, ExportFormat.MRC, ExportFormat.ERG],
        format_func=lambda f: FORMAT_LABELS[f.value],
    )
    if st.button("Build archive", type="primary"):
        batch = export_all_workouts(plan, batch_format, settings)
        st.session_state["last_batch"] = batch

    batch = st.session_state.get("last_batch")
    if batch is not None:
        bc1, bc2, bc3 = st.columns(3)
        bc1.metric("Exported", str(batch.exported))
        bc2.metric("Skipped", str(batch.skipped))
        bc3.metric("Errors", str(len(batch.errors)))
        for error in batch.errors:
            st.warning(error)
        if batch.archive is not None:
            st.download_button(
                f"Download {batch.archive.filename}",
                data=batch.archive.as_bytes(),
                file_name=batch.archive.filename,
                mime=batch.archive.media_type,
                key="dl_batch",
            )
        else:
            st.info("No workouts in this plan support that format.")
