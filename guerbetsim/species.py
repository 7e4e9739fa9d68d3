from typing import Dict, Mapping, Sequence, Tuple

import numpy as np

Species = str
SpeciesState = Dict[Species, float]

ALCOHOLS: Tuple[Species, ...] = ("C2_OH", "C4_OH", "C6_OH")
ALDEHYDES: Tuple[Species, ...] = ("C2_CHO", "C4_CHO", "C6_CHO")
ENALS: Tuple[Species, ...] = ("C4_Enal", "C6_Enal")

SPECIES: Tuple[Species, ...] = ALCOHOLS + ALDEHYDES + ENALS

FEEDSTOCK: Species = "C2_OH"
# shown as text readouts (butanol, hexanol)
TRACKED_SPECIES: Tuple[Species, ...] = ("C4_OH", "C6_OH")
CHARTED_SPECIES: Tuple[Species, ...] = ALCOHOLS

LABELS: Dict[Species, str] = {
    "C2_OH": "Ethanol (C2)",
    "C4_OH": "Butanol (C4)",
    "C6_OH": "Hexanol (C6)",
    "C2_CHO": "Acetaldehyde (C2)",
    "C4_CHO": "Butanal (C4)",
    "C6_CHO": "Hexanal (C6)",
    "C4_Enal": "2-Butenal (C4)",
    "C6_Enal": "2-Hexenal (C6)",
}


def initial_state(initial_concentration: float = 1.0) -> SpeciesState:
    """Pure feedstock charge: all ethanol, nothing else."""
    state = {sp: 0.0 for sp in SPECIES}
    state[FEEDSTOCK] = float(initial_concentration)
    return state


def total_concentration(state: Mapping[Species, float]) -> float:
    return sum(state[sp] for sp in SPECIES)


def to_vector(state: Mapping[Species, float]) -> np.ndarray:
    return np.array([state[sp] for sp in SPECIES], dtype=float)


def from_vector(values: Sequence[float]) -> SpeciesState:
    if len(values) != len(SPECIES):
        raise ValueError(f"Expected {len(SPECIES)} concentrations, got {len(values)}")
    return {sp: float(v) for sp, v in zip(SPECIES, values)}
