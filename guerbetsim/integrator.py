from typing import Dict, Mapping

from .kinetics import RateConstants, Reaction, net_rates, reaction_rates
from .species import SPECIES, Species, SpeciesState


def species_deltas(rates: Mapping[Reaction, float], dt: float) -> SpeciesState:
    """Change of every species over one explicit Euler step of size dt."""
    return {sp: rate * dt for sp, rate in net_rates(rates).items()}


def apply_deltas(state: Dict[Species, float], deltas: Mapping[Species, float]) -> Dict[Species, float]:
    """Add deltas to state in place, flooring each species at zero.

    Mass pushed below zero is dropped, not redistributed.
    """
    for sp in SPECIES:
        state[sp] = max(0.0, state[sp] + deltas[sp])
    return state


def euler_step(state: Dict[Species, float], k: RateConstants, dt: float) -> Dict[Species, float]:
    """Advance state in place by one forward Euler step."""
    return apply_deltas(state, species_deltas(reaction_rates(state, k), dt))


def advance(state: Mapping[Species, float], k: RateConstants, dt: float) -> SpeciesState:
    """Return the state one step of size dt later, leaving the input untouched.

    Explicit first order only: with k * dt above about 1 the step overshoots
    and the clamp hides it.
    """
    next_state = {sp: float(state[sp]) for sp in SPECIES}
    return euler_step(next_state, k, dt)
