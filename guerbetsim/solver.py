from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd
from scipy.integrate import solve_ivp

from .kinetics import RateConstants, dcdt
from .observers import TrajectoryRecorder
from .simulation import SimulationSession
from .species import SPECIES, from_vector, initial_state, to_vector


def reference_trajectory(
    constants: RateConstants,
    t_end: float,
    t_eval: Optional[Sequence[float]] = None,
    initial_concentration: float = 1.0,
    method: str = "LSODA",
    rtol: float = 1e-8,
    atol: float = 1e-10,
) -> pd.DataFrame:
    """Integrate the same rate laws with an adaptive SciPy solver.

    No clamping is applied, so this is the trajectory the fixed-step Euler
    run approximates. Columns: time, then one per species.
    """
    def rhs(_t: float, y: np.ndarray) -> np.ndarray:
        return to_vector(dcdt(from_vector(y), constants))

    y0 = to_vector(initial_state(initial_concentration))
    sol = solve_ivp(
        rhs,
        t_span=(0.0, t_end),
        y0=y0,
        t_eval=np.asarray(t_eval, dtype=float) if t_eval is not None else None,
        method=method,
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        raise RuntimeError(f"Reference integration failed: {sol.message}")
    df = pd.DataFrame(sol.y.T, columns=list(SPECIES))
    df.insert(0, "time", sol.t)
    return df


def euler_trajectory(
    constants: RateConstants,
    *,
    time_step: float = 0.05,
    max_time: float = 200.0,
    sample_interval: float = 1.0,
    initial_concentration: float = 1.0,
) -> pd.DataFrame:
    """Sampled fixed-step trajectory with every species charted."""
    recorder = TrajectoryRecorder()
    session = SimulationSession(
        constants,
        time_step=time_step,
        max_time=max_time,
        sample_interval=sample_interval,
        initial_concentration=initial_concentration,
        observers=[recorder],
        charted=SPECIES,
    )
    session.run_to_completion()
    return recorder.to_frame()


def compare_with_reference(euler: pd.DataFrame, reference: pd.DataFrame) -> pd.Series:
    """Max absolute deviation per species over the times both frames share."""
    merged = pd.merge(
        euler.round({"time": 6}),
        reference.round({"time": 6}),
        on="time",
        suffixes=("_euler", "_ref"),
    )
    if merged.empty:
        raise ValueError("Trajectories share no sample times")
    return pd.Series(
        {sp: float(np.max(np.abs(merged[f"{sp}_euler"] - merged[f"{sp}_ref"]))) for sp in SPECIES}
    )
