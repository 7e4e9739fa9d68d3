"""GuerbetSim: fixed-step kinetics of ethanol upgrading to higher alcohols.

This package provides:
- Species: the eight-species state and its initial feedstock charge
- Kinetics: rate constants k1..k4, rate laws and stoichiometry
- Integrator: explicit Euler step with clamp-to-zero
- Simulation: run session (start/step/reset/cancel) with an asyncio loop
- Observers: display, chart and particle collaborators
- Solver: SciPy reference solution for checking the Euler run

Run the CLI with: python -m guerbetsim.cli
"""

__all__ = [
    "species",
    "kinetics",
    "integrator",
    "simulation",
    "observers",
    "solver",
    "config",
]

__version__ = "0.1.0"
