import logging
import math
import random

import streamlit as st
import pandas as pd
import numpy as np
import altair as alt
import plotly.graph_objects as go

import balance_config as bc
import course_presets as presets
import hole_linter as hl
import hole_scoring as hs
from course_model import PAR_AUTO, PAR_MANUAL, TERRAIN_TYPES, TREE
from golfer_profiles import BOGEY, SCRATCH, get_golfer_profile
from playable_path import find_best_playable_path

logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)

# ------------------------------------------------------------
# Page config
# ------------------------------------------------------------
st.set_page_config(
    page_title="Hole Inspector",
    page_icon="⛳",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ------------------------------------------------------------
# Session state defaults
# ------------------------------------------------------------

DEFAULTS = {
    "preset": "Straightaway",     # which sample hole to load
    "random_seed": 7,             # seed for the random practice hole
    "yards_per_tile": 10.0,       # course scale
    "par_mode": PAR_AUTO,         # AUTO vs MANUAL par
    "par_manual": 4,
}

TERRAIN_COLORS = {
    "fairway": "#4caf50",
    "rough": "#2e7d32",
    "deep_rough": "#1b4d20",
    "sand": "#e6d690",
    "water": "#3a7bd5",
    "green": "#9be37b",
    "tee": "#c0a16b",
    "path": "#b0b0b0",
}

SEVERITY_ICON = {hl.BAD: "🔴", hl.WARN: "🟠", hl.INFO: "🔵"}


def init_session_state():
    for k, v in DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v


init_session_state()


def _fmt_shots(x: float) -> str:
    return f"{x:.2f}" if math.isfinite(x) else "∞"


# ------------------------------------------------------------
# Sidebar controls
# ------------------------------------------------------------

with st.sidebar:
    st.header("Hole Setup")

    options = list(presets.PRESETS) + ["Random"]
    st.session_state.preset = st.selectbox(
        "Sample hole",
        options,
        index=options.index(st.session_state.preset),
        help="Load one of the sample layouts, or generate a random practice hole.",
    )
    if st.session_state.preset == "Random":
        st.session_state.random_seed = int(st.number_input(
            "Random seed",
            min_value=0,
            max_value=10_000,
            value=int(st.session_state.random_seed),
            step=1,
        ))

    st.session_state.yards_per_tile = st.slider(
        "Yards per tile",
        min_value=5.0,
        max_value=15.0,
        value=float(st.session_state.yards_per_tile),
        step=0.5,
        help="Course scale. Every shot distance is tiles × yards per tile.",
    )

    st.markdown("---")
    st.markdown("**Par**")
    st.session_state.par_mode = st.radio(
        "Par mode",
        [PAR_AUTO, PAR_MANUAL],
        index=0 if st.session_state.par_mode == PAR_AUTO else 1,
        horizontal=True,
    )
    if st.session_state.par_mode == PAR_MANUAL:
        st.session_state.par_manual = st.selectbox("Manual par", [3, 4, 5], index=1)


def load_hole():
    ypt = st.session_state.yards_per_tile
    if st.session_state.preset == "Random":
        rng = random.Random(st.session_state.random_seed)
        course, hole = presets.generate_random_hole(rng, yards_per_tile=ypt)
    else:
        course, hole = presets.PRESETS[st.session_state.preset](yards_per_tile=ypt)
    hole.par_mode = st.session_state.par_mode
    hole.par_manual = st.session_state.par_manual
    return course, hole


course, hole = load_hole()
score = hs.score_hole(course, hole, 0)
evaluation = hl.evaluate_hole(course, hole, 0)
walk = find_best_playable_path(course, hole.tee, hole.green)
log.info(
    "Inspecting %s: par %d, overall %.1f, %d lint issue(s)",
    course.name, score.par, score.overall_hole_score, len(evaluation.issues),
)


# ------------------------------------------------------------
# Drawing helpers
# ------------------------------------------------------------

def draw_course(course, score, walk):
    """Terrain heatmap with the scratch shot plan and walking route on top."""
    codes = {t: i for i, t in enumerate(TERRAIN_TYPES)}
    z = np.array(
        [codes.get(t, 0) for t in course.tiles], dtype=float
    ).reshape(course.height, course.width)

    n = len(TERRAIN_TYPES)
    colorscale = []
    for i, t in enumerate(TERRAIN_TYPES):
        colorscale.append([i / n, TERRAIN_COLORS[t]])
        colorscale.append([(i + 1) / n, TERRAIN_COLORS[t]])

    fig = go.Figure(
        go.Heatmap(
            z=z,
            zmin=-0.5,
            zmax=n - 0.5,
            colorscale=colorscale,
            showscale=False,
            hovertemplate="x=%{x}, y=%{y}<extra></extra>",
        )
    )

    if walk is not None:
        fig.add_trace(go.Scatter(
            x=[p.x for p in walk.path],
            y=[p.y for p in walk.path],
            mode="lines",
            line=dict(color="#ffffff", width=1, dash="dot"),
            name="Walking route",
        ))

    if score.shot_plan:
        xs = [score.shot_plan[0].from_tile.x] + [s.to_tile.x for s in score.shot_plan]
        ys = [score.shot_plan[0].from_tile.y] + [s.to_tile.y for s in score.shot_plan]
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="lines+markers",
            line=dict(color="#f1c40f", width=3),
            marker=dict(size=9),
            name="Scratch plan",
        ))

    trees = [o for o in course.obstacles if o.type == TREE]
    bushes = [o for o in course.obstacles if o.type != TREE]
    for group, symbol, label in ((trees, "triangle-up", "Trees"), (bushes, "circle", "Bushes")):
        if group:
            fig.add_trace(go.Scatter(
                x=[o.x for o in group],
                y=[o.y for o in group],
                mode="markers",
                marker=dict(symbol=symbol, size=8, color="#0b3d0b"),
                name=label,
            ))

    fig.update_yaxes(autorange="reversed", scaleanchor="x", showgrid=False)
    fig.update_xaxes(showgrid=False)
    fig.update_layout(
        height=460,
        margin=dict(t=20, b=10, l=10, r=10),
        legend=dict(orientation="h"),
        plot_bgcolor="#05070b",
    )
    st.plotly_chart(fig, use_container_width=True)


def draw_corridor_chart(corridor):
    total = corridor["samples"] or 1
    df = pd.DataFrame(
        {
            "terrain": list(TERRAIN_TYPES),
            "share": [corridor[t] / total for t in TERRAIN_TYPES],
        }
    )
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("share:Q", title="Share of corridor samples", axis=alt.Axis(format="%")),
            y=alt.Y("terrain:N", sort="-x", title=None),
            color=alt.Color(
                "terrain:N",
                scale=alt.Scale(domain=list(TERRAIN_COLORS), range=list(TERRAIN_COLORS.values())),
                legend=None,
            ),
        )
        .properties(height=240)
    )
    st.altair_chart(chart, use_container_width=True)


# ------------------------------------------------------------
# Main layout
# ------------------------------------------------------------

st.title("Hole Inspector")
st.caption(
    "How a scratch and a bogey golfer would play this hole: the cheapest expected "
    "sequence of shots, derived par, and playability / difficulty / aesthetics ratings."
)

tab_hole, tab_plan, tab_lint, tab_bags = st.tabs(["Hole", "Shot Plan", "Issues", "Bags"])

with tab_hole:
    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Par", f"{score.par}", help=f"Auto par: {score.auto_par}")
    with col2:
        st.metric("Overall", f"{score.overall_hole_score:.0f}")
    with col3:
        st.metric("Playability", f"{score.playability_score:.0f}")
    with col4:
        st.metric("Difficulty", f"{score.difficulty_score:.0f}")
    with col5:
        st.metric("Aesthetics", f"{score.aesthetics_score:.0f}")

    draw_course(course, score, walk)

    ypt = course.yards_per_tile
    st.markdown(
        f"**Distance:** {score.straight_distance * ypt:.0f} yds straight, "
        f"{score.effective_distance * ypt:.0f} yds as played • "
        f"**Scratch:** {_fmt_shots(score.scratch_shots_to_green)} shots to green • "
        f"**Bogey:** {_fmt_shots(score.bogey_shots_to_green)} shots to green"
    )
    if score.reachable_in_two:
        st.success("Reachable in two for a scratch golfer.")
    if not score.is_valid:
        st.warning("This hole is not yet valid: " + "; ".join(score.issues))

    st.markdown("### Corridor Composition")
    draw_corridor_chart(score.corridor)

with tab_plan:
    st.subheader("Scratch Shot Plan")
    if not score.shot_plan:
        st.info("No shot plan: the green cannot be reached with the scratch bag.")
    else:
        df_plan = pd.DataFrame(
            [
                {
                    "Shot": i + 1,
                    "From": f"({s.from_tile.x}, {s.from_tile.y})",
                    "To": f"({s.to_tile.x}, {s.to_tile.y})",
                    "Club": s.club,
                    "Utilization": s.utilization,
                    "Expected strokes": s.expected_shot_cost,
                    "Trace": ", ".join(s.debug),
                }
                for i, s in enumerate(score.shot_plan)
            ]
        )
        df_plan["Utilization"] = (df_plan["Utilization"] * 100).round(0)
        df_plan["Expected strokes"] = df_plan["Expected strokes"].round(2)
        st.dataframe(df_plan, use_container_width=True)

with tab_lint:
    st.subheader("Hole Issues")
    if not evaluation.issues:
        st.success("No issues found.")
    for issue in evaluation.issues:
        with st.expander(f"{SEVERITY_ICON.get(issue.severity, '')} {issue.title}"):
            st.markdown(issue.detail)
            if issue.suggested_fixes:
                st.markdown("**Suggested fixes:** " + ", ".join(issue.suggested_fixes))

with tab_bags:
    st.subheader("Golfer Bags")
    for name in (SCRATCH, BOGEY):
        golfer = get_golfer_profile(name, course)
        df_bag = pd.DataFrame(
            {
                "Club": [c.name for c in golfer.clubs],
                "Carry (yds)": [c.carry_yards for c in golfer.clubs],
                "Carry (tiles)": [round(c.carry_yards / golfer.yards_per_tile, 1) for c in golfer.clubs],
                "Dispersion (tiles)": [c.dispersion_tiles_base for c in golfer.clubs],
            }
        )
        st.markdown(f"**{name.title()}**")
        st.dataframe(df_bag, use_container_width=True)

    st.caption(
        f"Dispersion widens past {bc.DEFAULT_BALANCE.utilization_threshold:.0%} of carry; "
        f"water carries need a {bc.DEFAULT_BALANCE.carry_buffer_yards:.0f} yd buffer."
    )
