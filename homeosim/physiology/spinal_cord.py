import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from homeosim.core.enums import OrganType, TractStatus
from homeosim.core.utils import clamp01, mean_revert, require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import SpinalCordConfig

logger = logging.getLogger(__name__)

MOTOR = "motor"
SENSORY = "sensory"


@dataclass
class Tract:
    name: str
    direction: str  # "descending" or "ascending"
    baseline_velocity: float  # m/s
    band: Tuple[float, float]
    status: TractStatus = TractStatus.NORMAL
    signal_strength: float = 1.0  # 0 severed .. 1 intact
    conduction_velocity: float = 0.0

    def __post_init__(self):
        if self.conduction_velocity == 0.0:
            self.conduction_velocity = self.baseline_velocity


class SpinalCord(Organ):
    """
    Descending motor and ascending sensory tracts.

    Conduction velocity random-walks inside a healthy band that shrinks in
    proportion to signal strength; a severed tract conducts nothing.
    """
    organ_type = OrganType.SPINAL_CORD

    def __init__(self, organ_id: int, config: SpinalCordConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else SpinalCordConfig()
        cfg = self.config
        self.tracts: Dict[str, Tract] = {
            MOTOR: Tract(MOTOR, "descending", cfg.motor_velocity, cfg.motor_band),
            SENSORY: Tract(SENSORY, "ascending", cfg.sensory_velocity, cfg.sensory_band),
        }

    def _tract(self, name: str) -> Tract:
        try:
            return self.tracts[str(name).lower()]
        except KeyError:
            raise ValueError(f"Unknown spinal tract: {name!r}") from None

    def get_tract_status(self, name: str) -> TractStatus:
        return self._tract(name).status

    @property
    def motor_status(self) -> TractStatus:
        return self.tracts[MOTOR].status

    @property
    def reflex_arc_intact(self) -> bool:
        return all(tract.status is TractStatus.NORMAL for tract in self.tracts.values())

    def set_tract_status(self, name: str, status: TractStatus):
        tract = self._tract(name)
        status = TractStatus(status)
        tract.status = status
        if status is TractStatus.NORMAL:
            tract.signal_strength = 1.0
        elif status is TractStatus.SEVERED:
            tract.signal_strength = 0.0
            tract.conduction_velocity = 0.0
        else:
            tract.signal_strength = min(tract.signal_strength, 0.5)
        logger.info("Spinal %s tract set to %s", tract.name, status.value)

    def sever_tract(self, name: str):
        self.set_tract_status(name, TractStatus.SEVERED)

    def impair_tract(self, name: str, amount: float):
        """Reduce a tract's signal strength by ``amount`` (0..1); zero strength severs it."""
        amount = require_finite("impairment", amount)
        if not 0.0 <= amount <= 1.0:
            raise ValueError(f"Impairment must be within [0, 1], got {amount}")
        tract = self._tract(name)
        if tract.status is TractStatus.SEVERED:
            return
        tract.signal_strength = clamp01(tract.signal_strength - amount)
        if tract.signal_strength <= 0.0:
            self.set_tract_status(name, TractStatus.SEVERED)
        elif amount > 0.0:
            tract.status = TractStatus.IMPAIRED
            logger.info("Spinal %s tract impaired, strength %.2f", tract.name, tract.signal_strength)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        for tract in self.tracts.values():
            if tract.status is TractStatus.SEVERED:
                tract.conduction_velocity = 0.0
                continue
            low, high = tract.band
            s = tract.signal_strength
            tract.conduction_velocity = mean_revert(
                tract.conduction_velocity, tract.baseline_velocity * s, cfg.velocity_theta,
                cfg.velocity_noise, dt, low * s, high * s, rng,
            )

    def get_summary(self) -> str:
        lines = [f"Spinal Cord (ID {self.organ_id})"]
        for tract in self.tracts.values():
            lines.append(
                f"  {tract.name.capitalize()} ({tract.direction}): {tract.status.value}, "
                f"{tract.conduction_velocity:.1f} m/s, strength {tract.signal_strength:.2f}"
            )
        lines.append(f"  Reflex arc: {'intact' if self.reflex_arc_intact else 'compromised'}")
        return "\n".join(lines)
