import time

import pandas as pd
import plotly.express as px
import streamlit as st

from guerbetsim.config import get_settings
from guerbetsim.kinetics import RateConstants
from guerbetsim.observers import CATEGORY_COLORS, ParticleField, TextDisplay, TrajectoryRecorder, chart_range
from guerbetsim.simulation import SimulationSession
from guerbetsim.species import CHARTED_SPECIES, LABELS

st.set_page_config(page_title="GuerbetSim", page_icon="🧪", layout="wide")

st.title("🧪 GuerbetSim")
st.caption("Ethanol → acetaldehyde → enal → higher alcohols, fixed-step Euler")

settings = get_settings()


def read_sliders() -> RateConstants:
    return RateConstants(
        k1=st.session_state["k1"],
        k2=st.session_state["k2"],
        k3=st.session_state["k3"],
        k4=st.session_state["k4"],
    )


if "session" not in st.session_state:
    display = TextDisplay(initial_concentration=settings.initial_concentration)
    recorder = TrajectoryRecorder()
    particles = ParticleField(total=settings.total_particles, seed=0)
    session = SimulationSession.from_settings(
        settings, constants=read_sliders, observers=[display, recorder, particles]
    )
    st.session_state["session"] = session
    st.session_state["display"] = display
    st.session_state["recorder"] = recorder
    st.session_state["particles"] = particles

session: SimulationSession = st.session_state["session"]
display: TextDisplay = st.session_state["display"]
recorder: TrajectoryRecorder = st.session_state["recorder"]
particles: ParticleField = st.session_state["particles"]

# --- Controls ---
with st.sidebar:
    st.markdown("### Rate constants")
    locked = not display.controls_enabled
    st.slider("k1 dehydrogenation", 0.0, 1.0, settings.k1, 0.01, key="k1", disabled=locked)
    st.slider("k2 aldol condensation", 0.0, 1.0, settings.k2, 0.01, key="k2", disabled=locked)
    st.slider("k3 C=C hydrogenation", 0.0, 1.0, settings.k3, 0.01, key="k3", disabled=locked)
    st.slider("k4 C=O hydrogenation", 0.0, 1.0, settings.k4, 0.01, key="k4", disabled=locked)
    cols = st.columns(2)
    with cols[0]:
        if st.button("Start", use_container_width=True, disabled=locked):
            session.start()
    with cols[1]:
        if st.button("Reset", use_container_width=True):
            session.reset()

# --- Readouts ---
left, mid, right = st.columns(3)
with left:
    st.metric("Time (s)", display.readings["time"])
with mid:
    st.metric("Butanol (C4)", display.readings["C4_OH"])
with right:
    st.metric("Hexanol (C6)", display.readings["C6_OH"])

chart_col, particle_col = st.columns(2)
with chart_col:
    df = recorder.to_frame()
    if df.empty:
        df = pd.DataFrame(columns=["time"] + list(CHARTED_SPECIES))
    df = df.rename(columns=LABELS)
    fig = px.line(df, x="time", y=[LABELS[sp] for sp in CHARTED_SPECIES], range_y=list(chart_range(settings.initial_concentration)))
    fig.update_layout(xaxis_title="Time (s)", yaxis_title="Concentration (mol/L)")
    st.plotly_chart(fig, use_container_width=True)
with particle_col:
    pts = pd.DataFrame(
        {
            "x": particles.positions[:, 0],
            "y": particles.positions[:, 1],
            "category": particles.categories,
        }
    )
    scatter = px.scatter(
        pts, x="x", y="y", color="category", color_discrete_map=CATEGORY_COLORS,
        range_x=[0, particles.width], range_y=[0, particles.height],
    )
    scatter.update_traces(marker={"size": 8})
    scatter.update_layout(xaxis_visible=False, yaxis_visible=False)
    st.plotly_chart(scatter, use_container_width=True)

st.caption(f"Status: {session.status.value}")

# One chart sample per rerun keeps the page responsive
if session.is_running:
    for _ in range(session.steps_per_sample):
        if not session.step():
            break
    time.sleep(settings.frame_interval)
    st.rerun()
