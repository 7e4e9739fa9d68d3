from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .kinetics import RateConstants


class SimulationSettings(BaseSettings):
    """Run defaults, overridable with GUERBETSIM_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="GUERBETSIM_", env_file=".env", extra="ignore")

    time_step: float = Field(0.05, gt=0.0)
    max_time: float = Field(200.0, gt=0.0)
    # simulated time between chart samples
    sample_interval: float = Field(1.0, gt=0.0)
    # wall-clock seconds between ticks of the async loop
    frame_interval: float = Field(1.0 / 60.0, ge=0.0)
    initial_concentration: float = Field(1.0, ge=0.0)
    total_particles: int = Field(200, ge=0)

    k1: float = Field(0.1, ge=0.0)
    k2: float = Field(0.5, ge=0.0)
    k3: float = Field(0.2, ge=0.0)
    k4: float = Field(0.1, ge=0.0)

    log_level: str = "INFO"

    def rate_constants(self) -> RateConstants:
        return RateConstants(k1=self.k1, k2=self.k2, k3=self.k3, k4=self.k4)


def get_settings(**overrides) -> SimulationSettings:
    return SimulationSettings(**overrides)
