from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple, Union
import asyncio
import logging

from .config import SimulationSettings
from .integrator import euler_step
from .kinetics import RateConstants
from .observers import SimulationObserver
from .species import CHARTED_SPECIES, Species, SpeciesState, initial_state

logger = logging.getLogger(__name__)

ConstantsSource = Union[RateConstants, Callable[[], RateConstants]]


class SimulationStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class SimulationStateError(RuntimeError):
    pass


class SimulationSession:
    """One batch run of the network, owned by the caller.

    The session is the only writer of `state`. Observers are called
    synchronously after each tick has finished mutating it.

    Usage:
        session = SimulationSession(RateConstants(k1=0.1, k2=0.5, k3=0.2, k4=0.1))
        session.run_to_completion()
        # or, cooperatively on an event loop:
        await session.run()
    """

    def __init__(
        self,
        constants: ConstantsSource,
        *,
        time_step: float = 0.05,
        max_time: float = 200.0,
        sample_interval: float = 1.0,
        frame_interval: float = 1.0 / 60.0,
        initial_concentration: float = 1.0,
        observers: Optional[Iterable[SimulationObserver]] = None,
        charted: Tuple[Species, ...] = CHARTED_SPECIES,
    ):
        if time_step <= 0.0:
            raise ValueError("time_step must be positive")
        if max_time <= 0.0:
            raise ValueError("max_time must be positive")
        if sample_interval <= 0.0:
            raise ValueError("sample_interval must be positive")
        self.constants = constants
        self.time_step = float(time_step)
        self.max_time = float(max_time)
        self.frame_interval = float(frame_interval)
        self.initial_concentration = float(initial_concentration)
        self.charted = charted
        # explicit counter instead of testing sim_time for whole numbers
        self.steps_per_sample = max(1, int(round(sample_interval / self.time_step)))
        self.observers: List[SimulationObserver] = list(observers or [])

        self.status = SimulationStatus.IDLE
        self.state: SpeciesState = initial_state(self.initial_concentration)
        self.ticks = 0
        self._generation = 0
        self._stiff_warned = False

    @classmethod
    def from_settings(
        cls,
        settings: SimulationSettings,
        constants: Optional[ConstantsSource] = None,
        observers: Optional[Iterable[SimulationObserver]] = None,
    ) -> "SimulationSession":
        return cls(
            constants if constants is not None else settings.rate_constants(),
            time_step=settings.time_step,
            max_time=settings.max_time,
            sample_interval=settings.sample_interval,
            frame_interval=settings.frame_interval,
            initial_concentration=settings.initial_concentration,
            observers=observers,
        )

    @property
    def sim_time(self) -> float:
        return self.ticks * self.time_step

    @property
    def is_running(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    def add_observer(self, observer: SimulationObserver) -> None:
        self.observers.append(observer)

    def read_constants(self) -> RateConstants:
        source = self.constants
        return source() if callable(source) else source

    # -----------------------
    # Mutators
    # -----------------------
    def reset(self) -> None:
        """Back to IDLE with the initial charge at t = 0; observers drop their history."""
        self._generation += 1
        self.status = SimulationStatus.IDLE
        self.state = initial_state(self.initial_concentration)
        self.ticks = 0
        self._stiff_warned = False
        for obs in self.observers:
            obs.on_reset()

    def cancel(self) -> None:
        if self.is_running:
            logger.info("Run cancelled at t=%.2f", self.sim_time)
        self.reset()

    def start(self) -> int:
        """Begin a fresh run from the initial charge. Returns the run's generation."""
        self.reset()
        self.status = SimulationStatus.RUNNING
        logger.info(
            "Run started: dt=%g max_time=%g sample every %d ticks",
            self.time_step, self.max_time, self.steps_per_sample,
        )
        for obs in self.observers:
            obs.on_start(self)
        return self._generation

    def step(self) -> bool:
        """Advance one tick. Returns True while the run should continue."""
        if not self.is_running:
            raise SimulationStateError(f"step() requires a running session, status is {self.status.value}")

        k = self.read_constants()
        self._warn_if_overshooting(k)
        euler_step(self.state, k, self.time_step)
        self.ticks += 1

        for obs in self.observers:
            obs.on_tick(self)

        if self.ticks % self.steps_per_sample == 0:
            label = f"{self.sim_time:.1f}"
            values = {sp: self.state[sp] for sp in self.charted}
            logger.debug("Sample %s: %s", label, values)
            for obs in self.observers:
                obs.on_sample(label, values, self.sim_time)

        if self.sim_time >= self.max_time:
            self.status = SimulationStatus.COMPLETED
            logger.info("Run completed at t=%.2f after %d ticks", self.sim_time, self.ticks)
            for obs in self.observers:
                obs.on_complete(self)
            return False
        return True

    # -----------------------
    # Loops
    # -----------------------
    def run_to_completion(self) -> SimulationStatus:
        """Start and step without yielding until max_time is reached."""
        self.start()
        while self.step():
            pass
        return self.status

    async def run(self, frame_interval: Optional[float] = None) -> SimulationStatus:
        """Start and step once per frame, yielding to the event loop in between.

        A cancel(), reset() or start() issued while suspended is seen at the
        next tick boundary and ends this loop.
        """
        interval = self.frame_interval if frame_interval is None else frame_interval
        generation = self.start()
        while self.is_running and self._generation == generation:
            if not self.step():
                break
            await asyncio.sleep(interval)
        return self.status

    def _warn_if_overshooting(self, k: RateConstants) -> None:
        if self._stiff_warned:
            return
        if k.max_value() * self.time_step > 1.0:
            logger.warning(
                "k*dt = %.3g exceeds 1; explicit Euler will overshoot and clamping will hide it",
                k.max_value() * self.time_step,
            )
            self._stiff_warned = True
