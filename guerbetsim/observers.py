from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple
import logging
import math

import numpy as np
import pandas as pd

from .species import TRACKED_SPECIES, Species, initial_state

if TYPE_CHECKING:
    from .simulation import SimulationSession

logger = logging.getLogger(__name__)


class SimulationObserver:
    """Collaborator notified by a SimulationSession. All hooks are no-ops."""

    def on_start(self, session: "SimulationSession") -> None:
        pass

    def on_tick(self, session: "SimulationSession") -> None:
        pass

    def on_sample(self, time_label: str, values: Mapping[Species, float], sim_time: float) -> None:
        pass

    def on_reset(self) -> None:
        pass

    def on_complete(self, session: "SimulationSession") -> None:
        pass


class TextDisplay(SimulationObserver):
    """Latest time and tracked-species readouts, formatted for labels."""

    def __init__(self, tracked: Tuple[Species, ...] = TRACKED_SPECIES, initial_concentration: float = 1.0):
        self.tracked = tracked
        self.initial_concentration = initial_concentration
        self.controls_enabled = True
        self.readings: Dict[str, str] = {}
        self.on_reset()

    def _update(self, sim_time: float, state: Mapping[Species, float]) -> None:
        self.readings = {"time": f"{sim_time:.1f}"}
        for sp in self.tracked:
            self.readings[sp] = f"{state[sp]:.3f}"

    def on_start(self, session):
        self.controls_enabled = False

    def on_tick(self, session):
        self._update(session.sim_time, session.state)
        logger.debug("t=%s %s", self.readings["time"], self.readings)

    def on_reset(self):
        self.controls_enabled = True
        self._update(0.0, initial_state(self.initial_concentration))

    def on_complete(self, session):
        self.controls_enabled = True


class TrajectoryRecorder(SimulationObserver):
    """Time-series chart model: one row per sample."""

    def __init__(self):
        self.labels: List[str] = []
        self.times: List[float] = []
        self.rows: List[Dict[Species, float]] = []

    def on_sample(self, time_label, values, sim_time):
        self.labels.append(time_label)
        self.times.append(sim_time)
        self.rows.append(dict(values))

    def on_reset(self):
        self.labels = []
        self.times = []
        self.rows = []

    def __len__(self) -> int:
        return len(self.labels)

    def to_frame(self) -> pd.DataFrame:
        columns = list(self.rows[0]) if self.rows else []
        df = pd.DataFrame(self.rows, columns=columns)
        df.insert(0, "time", self.times)
        return df


def chart_range(initial_concentration: float) -> Tuple[float, float]:
    """Concentration axis limits; the feedstock charge is the largest value reachable."""
    return (0.0, max(1.0, initial_concentration))


CATEGORY_COLORS: Dict[str, str] = {
    "c2": "#3498db",
    "c4": "#2ecc71",
    "c6": "#f1c40f",
    "intermediate": "#95a5a6",
}


def particle_counts(state: Mapping[Species, float], total: int) -> Dict[str, int]:
    """Split `total` particles by alcohol concentration; the rest are intermediates."""
    counts = {
        "c2": int(round(total * state["C2_OH"])),
        "c4": int(round(total * state["C4_OH"])),
        "c6": int(round(total * state["C6_OH"])),
    }
    counts["intermediate"] = max(0, total - sum(counts.values()))
    return counts


@dataclass(eq=False)
class ParticleField(SimulationObserver):
    """Decorative particle population derived from the species state.

    Re-seeded when empty and on every even whole unit of simulated time;
    between re-seeds the particles drift and bounce off the walls.
    """
    total: int = 200
    width: float = 600.0
    height: float = 400.0
    speed: float = 1.0
    seed: Optional[int] = None
    positions: np.ndarray = field(init=False)
    velocities: np.ndarray = field(init=False)
    categories: List[str] = field(init=False)

    def __post_init__(self):
        self._rng = np.random.default_rng(self.seed)
        self.clear()

    def clear(self) -> None:
        self.positions = np.zeros((0, 2))
        self.velocities = np.zeros((0, 2))
        self.categories = []

    def reseed(self, state: Mapping[Species, float]) -> None:
        counts = particle_counts(state, self.total)
        self.categories = [cat for cat, n in counts.items() for _ in range(n)]
        n = len(self.categories)
        self.positions = self._rng.random((n, 2)) * np.array([self.width, self.height])
        self.velocities = (self._rng.random((n, 2)) - 0.5) * 2.0 * self.speed

    def move(self) -> None:
        self.positions += self.velocities
        out_x = (self.positions[:, 0] < 0) | (self.positions[:, 0] > self.width)
        out_y = (self.positions[:, 1] < 0) | (self.positions[:, 1] > self.height)
        self.velocities[out_x, 0] *= -1
        self.velocities[out_y, 1] *= -1

    def counts(self) -> Dict[str, int]:
        return {cat: self.categories.count(cat) for cat in CATEGORY_COLORS}

    def on_tick(self, session):
        if not self.categories or math.floor(session.sim_time) % 2 == 0:
            self.reseed(session.state)
        self.move()

    def on_reset(self):
        self.clear()

