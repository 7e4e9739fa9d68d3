from dataclasses import dataclass, asdict
from typing import Dict, Mapping, Tuple
import math

from .species import SPECIES, Species, SpeciesState

Reaction = str


@dataclass(frozen=True)
class RateConstants:
    """Rate constants of the four reaction families.

    k1: dehydrogenation (alcohol -> aldehyde)
    k2: aldol condensation (aldehyde + aldehyde -> enal)
    k3: C=C hydrogenation (enal -> saturated aldehyde)
    k4: C=O hydrogenation (aldehyde -> alcohol)
    """
    k1: float = 0.0
    k2: float = 0.0
    k3: float = 0.0
    k4: float = 0.0

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")

    def max_value(self) -> float:
        return max(self.k1, self.k2, self.k3, self.k4)


# reaction -> {species: nu}; negative for consumed, positive for produced
STOICHIOMETRY: Dict[Reaction, Dict[Species, float]] = {
    "dehydro_C2": {"C2_OH": -1.0, "C2_CHO": 1.0},
    "dehydro_C4": {"C4_OH": -1.0, "C4_CHO": 1.0},
    # two acetaldehyde units per self-condensation
    "aldol_C2_C2": {"C2_CHO": -2.0, "C4_Enal": 1.0},
    "aldol_C2_C4": {"C2_CHO": -1.0, "C4_CHO": -1.0, "C6_Enal": 1.0},
    "hydro_olefin_C4": {"C4_Enal": -1.0, "C4_CHO": 1.0},
    "hydro_olefin_C6": {"C6_Enal": -1.0, "C6_CHO": 1.0},
    "hydro_carbonyl_C2": {"C2_CHO": -1.0, "C2_OH": 1.0},
    "hydro_carbonyl_C4": {"C4_CHO": -1.0, "C4_OH": 1.0},
    "hydro_carbonyl_C6": {"C6_CHO": -1.0, "C6_OH": 1.0},
}

REACTIONS: Tuple[Reaction, ...] = tuple(STOICHIOMETRY)


def reaction_rates(c: Mapping[Species, float], k: RateConstants) -> Dict[Reaction, float]:
    """Instantaneous rate of every reaction for concentrations c."""
    return {
        "dehydro_C2": k.k1 * c["C2_OH"],
        "dehydro_C4": k.k1 * c["C4_OH"],
        "aldol_C2_C2": k.k2 * c["C2_CHO"] * c["C2_CHO"],
        "aldol_C2_C4": k.k2 * c["C2_CHO"] * c["C4_CHO"],
        "hydro_olefin_C4": k.k3 * c["C4_Enal"],
        "hydro_olefin_C6": k.k3 * c["C6_Enal"],
        "hydro_carbonyl_C2": k.k4 * c["C2_CHO"],
        "hydro_carbonyl_C4": k.k4 * c["C4_CHO"],
        "hydro_carbonyl_C6": k.k4 * c["C6_CHO"],
    }


def net_rates(rates: Mapping[Reaction, float]) -> SpeciesState:
    """Combine reaction rates into per-species production rates."""
    dcdt = {sp: 0.0 for sp in SPECIES}
    for rxn in REACTIONS:
        r = rates[rxn]
        for sp, nu in STOICHIOMETRY[rxn].items():
            dcdt[sp] += nu * r
    return dcdt


def dcdt(c: Mapping[Species, float], k: RateConstants) -> SpeciesState:
    return net_rates(reaction_rates(c, k))
