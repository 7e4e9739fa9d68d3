import asyncio
import itertools

import pytest

from guerbetsim.config import get_settings
from guerbetsim.kinetics import RateConstants
from guerbetsim.observers import SimulationObserver, TrajectoryRecorder
from guerbetsim.simulation import SimulationSession, SimulationStateError, SimulationStatus
from guerbetsim.species import SPECIES, initial_state, total_concentration


class EventLog(SimulationObserver):
    def __init__(self):
        self.events = []

    def on_start(self, session):
        self.events.append("start")

    def on_tick(self, session):
        self.events.append("tick")

    def on_sample(self, time_label, values, sim_time):
        self.events.append(("sample", time_label))

    def on_reset(self):
        self.events.append("reset")

    def on_complete(self, session):
        self.events.append("complete")


def test_first_tick_dehydrogenates():
    session = SimulationSession(RateConstants(k1=1.0), time_step=0.05)
    session.start()
    session.step()
    assert session.state["C2_OH"] == pytest.approx(0.95)
    assert session.state["C2_CHO"] == pytest.approx(0.05)
    assert session.sim_time == pytest.approx(0.05)


def test_completes_exactly_at_max_time():
    session = SimulationSession(RateConstants(k1=0.3, k2=0.5, k3=0.2, k4=0.1))
    status = session.run_to_completion()
    assert status is SimulationStatus.COMPLETED
    assert session.ticks == 4000
    assert session.sim_time >= 200.0
    assert session.sim_time - session.time_step < 200.0
    with pytest.raises(SimulationStateError):
        session.step()


def test_step_requires_running_session():
    session = SimulationSession(RateConstants())
    with pytest.raises(SimulationStateError):
        session.step()


def test_reset_restores_initial_charge_from_any_state():
    session = SimulationSession(RateConstants(k1=0.5, k2=0.5), max_time=5.0)
    session.reset()
    assert session.state == initial_state() and session.sim_time == 0.0

    session.start()
    for _ in range(10):
        session.step()
    session.reset()
    assert session.status is SimulationStatus.IDLE
    assert session.state == initial_state() and session.sim_time == 0.0

    session.run_to_completion()
    session.cancel()
    assert session.status is SimulationStatus.IDLE
    assert session.state == initial_state() and session.sim_time == 0.0


def test_start_discards_previous_trajectory():
    recorder = TrajectoryRecorder()
    session = SimulationSession(RateConstants(k1=0.5), max_time=3.0, observers=[recorder])
    session.run_to_completion()
    assert len(recorder) == 3
    session.start()
    assert len(recorder) == 0
    assert session.state == initial_state()


def test_one_chart_sample_per_time_unit():
    log = EventLog()
    session = SimulationSession(RateConstants(k1=0.2), max_time=3.0, observers=[log])
    session.run_to_completion()
    samples = [e for e in log.events if isinstance(e, tuple)]
    assert samples == [("sample", "1.0"), ("sample", "2.0"), ("sample", "3.0")]
    assert log.events[:2] == ["reset", "start"]
    assert log.events[-1] == "complete"
    assert log.events.count("tick") == 60


def test_constants_are_read_every_tick():
    # k1 only on the first tick, nothing afterwards
    source = itertools.chain([RateConstants(k1=1.0)], itertools.repeat(RateConstants()))
    session = SimulationSession(lambda: next(source), max_time=1.0)
    session.run_to_completion()
    assert session.state["C2_OH"] == pytest.approx(0.95)
    assert session.state["C2_CHO"] == pytest.approx(0.05)


def test_identical_inputs_give_identical_trajectories():
    def run():
        ks = itertools.cycle([RateConstants(k1=0.4, k2=0.6), RateConstants(k1=0.1, k3=0.3, k4=0.2)])
        recorder = TrajectoryRecorder()
        session = SimulationSession(lambda: next(ks), max_time=20.0, observers=[recorder])
        session.run_to_completion()
        return recorder.rows, dict(session.state)

    assert run() == run()


def test_non_negative_and_no_mass_gain_every_tick():
    session = SimulationSession(RateConstants(k1=0.9, k2=1.0, k3=0.7, k4=0.6), max_time=50.0)
    session.start()
    start_total = total_concentration(session.state)
    while session.step():
        assert all(session.state[sp] >= 0.0 for sp in SPECIES)
        assert total_concentration(session.state) <= start_total + 1e-12


def test_from_settings_uses_configured_clock():
    settings = get_settings(time_step=0.1, max_time=2.0, sample_interval=0.5)
    session = SimulationSession.from_settings(settings)
    assert session.steps_per_sample == 5
    session.run_to_completion()
    assert session.ticks == 20


def test_async_run_reaches_completion():
    session = SimulationSession(RateConstants(k1=0.5), max_time=1.0, frame_interval=0.0)
    status = asyncio.run(session.run())
    assert status is SimulationStatus.COMPLETED
    assert session.ticks == 20


def test_async_cancel_takes_effect_at_tick_boundary():
    log = EventLog()
    session = SimulationSession(RateConstants(k1=0.5), max_time=100.0, frame_interval=0.0, observers=[log])

    async def scenario():
        task = asyncio.create_task(session.run())
        while session.ticks < 5:
            await asyncio.sleep(0)
        cancelled_at = session.ticks
        session.cancel()
        return cancelled_at, await task

    cancelled_at, status = asyncio.run(scenario())
    assert status is SimulationStatus.IDLE
    assert session.state == initial_state()
    assert log.events[-1] == "reset"
    assert cancelled_at >= 5
    assert log.events.count("tick") == cancelled_at


def test_restart_supersedes_pending_loop():
    session = SimulationSession(RateConstants(k1=0.5), max_time=1.0, frame_interval=0.0)

    async def scenario():
        first = asyncio.create_task(session.run())
        await asyncio.sleep(0)
        second = asyncio.create_task(session.run())
        return await asyncio.gather(first, second)

    first, second = asyncio.run(scenario())
    assert second is SimulationStatus.COMPLETED
    assert session.ticks == 20
