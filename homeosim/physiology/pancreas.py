from dataclasses import dataclass

from homeosim.core.constants import GLUCOSE_HIGH_THRESHOLD, GLUCOSE_LOW_THRESHOLD
from homeosim.core.enums import OrganType
from homeosim.core.utils import clamp, mean_revert, require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import PancreasConfig


@dataclass(frozen=True)
class DigestiveEnzymes:
    """A packet of pancreatic juice: volume (mL) and enzyme concentrations (U/L)."""
    volume: float = 0.0
    amylase: float = 0.0
    lipase: float = 0.0


class Pancreas(Organ):
    """
    Endocrine islets (insulin, glucagon) responding to glucose outside the
    80-120 mg/dL band, and exocrine acini secreting amylase and lipase.
    """
    organ_type = OrganType.PANCREAS

    def __init__(self, organ_id: int, config: PancreasConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else PancreasConfig()
        cfg = self.config
        self.insulin = cfg.insulin  # U/h
        self.glucagon = cfg.glucagon  # ng/h
        self.amylase = cfg.amylase  # U/L
        self.lipase = cfg.lipase  # U/L
        self.enzymes_released = 0.0  # mL

    def release_enzymes(self, dt: float) -> DigestiveEnzymes:
        dt = require_finite("dt", dt, minimum=0.0)
        volume = self.config.secretion_rate * dt
        self.enzymes_released += volume
        return DigestiveEnzymes(volume=volume, amylase=self.amylase, lipase=self.lipase)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        glucose = patient.blood.glucose

        if glucose > GLUCOSE_HIGH_THRESHOLD:
            self.insulin += (glucose - GLUCOSE_HIGH_THRESHOLD) * cfg.insulin_gain * dt
        else:
            self.insulin -= cfg.insulin_decay * dt
        self.insulin = clamp(self.insulin, *cfg.insulin_band)

        if glucose < GLUCOSE_LOW_THRESHOLD:
            self.glucagon += (GLUCOSE_LOW_THRESHOLD - glucose) * cfg.glucagon_gain * dt
        else:
            self.glucagon -= cfg.glucagon_decay * dt
        self.glucagon = clamp(self.glucagon, *cfg.glucagon_band)

        self.amylase = mean_revert(
            self.amylase, cfg.amylase, cfg.enzyme_theta, cfg.enzyme_noise, dt, *cfg.amylase_band, rng,
        )
        self.lipase = mean_revert(
            self.lipase, cfg.lipase, cfg.enzyme_theta, cfg.enzyme_noise, dt, *cfg.lipase_band, rng,
        )

    def get_summary(self) -> str:
        return "\n".join([
            f"Pancreas (ID {self.organ_id})",
            f"  Insulin: {self.insulin:.2f} U/h, glucagon: {self.glucagon:.1f} ng/h",
            f"  Amylase: {self.amylase:.1f} U/L, lipase: {self.lipase:.1f} U/L",
        ])
