import logging
import math
from dataclasses import dataclass
from typing import List

from homeosim.core.constants import GLUCOSE_HIGH_THRESHOLD, GLUCOSE_LOW_THRESHOLD
from homeosim.core.enums import OrganType
from homeosim.core.utils import approach, mean_revert, require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import LiverConfig

logger = logging.getLogger(__name__)


@dataclass
class Lobule:
    metabolic_activity: float = 1.0
    damaged: bool = False


class Liver(Organ):
    """
    Lobule-based liver.

    Functional capacity is the mean activity of undamaged lobules. It scales
    bile and glucose output, toxin clearance, two-sided glucose regulation
    and the angiotensinogen supply used by the kidneys.
    """
    organ_type = OrganType.LIVER

    def __init__(self, organ_id: int, config: LiverConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else LiverConfig()
        cfg = self.config
        if cfg.lobule_count <= 0:
            raise ValueError("Liver needs at least one lobule")
        self.lobules: List[Lobule] = [Lobule() for _ in range(cfg.lobule_count)]
        self.bile_production_rate = cfg.bile_rate  # mL/s
        self.glucose_production_rate = cfg.glucose_production  # g/s
        self.alt = cfg.alt
        self.ast = cfg.ast
        self.bilirubin = cfg.bilirubin
        self.toxins_cleared = 0.0

    @property
    def capacity(self) -> float:
        healthy = sum(lobule.metabolic_activity for lobule in self.lobules if not lobule.damaged)
        return healthy / len(self.lobules)

    @property
    def damage_fraction(self) -> float:
        return sum(1 for lobule in self.lobules if lobule.damaged) / len(self.lobules)

    @property
    def angiotensinogen(self) -> float:
        return self.config.angiotensinogen_rate * self.capacity

    def inflict_damage(self, fraction: float):
        """Mark ``fraction`` of all lobules (healthy ones first) as damaged."""
        fraction = require_finite("damage fraction", fraction)
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Damage fraction must be within [0, 1], got {fraction}")
        count = int(round(fraction * len(self.lobules)))
        for lobule in self.lobules:
            if count <= 0:
                break
            if not lobule.damaged:
                lobule.damaged = True
                count -= 1
        logger.info("Liver damage now %.0f%% (capacity %.2f)", self.damage_fraction * 100, self.capacity)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        cap = self.capacity
        damage = self.damage_fraction

        self.bile_production_rate = mean_revert(
            self.bile_production_rate, cfg.bile_rate * cap, cfg.bile_theta, cfg.bile_noise,
            dt, 0.0, cfg.bile_max, rng,
        )
        self.glucose_production_rate = mean_revert(
            self.glucose_production_rate, cfg.glucose_production * cap, cfg.production_theta,
            cfg.glucose_production_noise, dt, 0.0, cfg.glucose_production_max, rng,
        )
        self.alt = mean_revert(
            self.alt, cfg.alt + cfg.enzyme_damage_gain * damage, cfg.lab_theta, cfg.enzyme_noise,
            dt, *cfg.enzyme_band, rng,
        )
        self.ast = mean_revert(
            self.ast, cfg.ast + cfg.enzyme_damage_gain * damage, cfg.lab_theta, cfg.enzyme_noise,
            dt, *cfg.enzyme_band, rng,
        )
        self.bilirubin = mean_revert(
            self.bilirubin, cfg.bilirubin + cfg.bilirubin_damage_gain * damage, cfg.lab_theta,
            cfg.bilirubin_noise, dt, *cfg.bilirubin_band, rng,
        )

        blood = patient.blood
        before = blood.toxins
        blood.toxins *= math.exp(-cfg.toxin_clearance * cap * dt)
        self.toxins_cleared += before - blood.toxins

        rate = cfg.glucose_regulation * cap
        if blood.glucose > GLUCOSE_HIGH_THRESHOLD:
            blood.glucose = approach(blood.glucose, GLUCOSE_HIGH_THRESHOLD, rate, dt)
        elif blood.glucose < GLUCOSE_LOW_THRESHOLD:
            blood.glucose = approach(blood.glucose, GLUCOSE_LOW_THRESHOLD, rate, dt)
        blood.clamp()

    def get_summary(self) -> str:
        return "\n".join([
            f"Liver (ID {self.organ_id})",
            f"  Capacity: {self.capacity * 100:.0f}% ({self.damage_fraction * 100:.0f}% lobules damaged)",
            f"  Bile: {self.bile_production_rate:.4f} mL/s, glucose output {self.glucose_production_rate:.5f} g/s",
            f"  ALT {self.alt:.0f} U/L, AST {self.ast:.0f} U/L, bilirubin {self.bilirubin:.2f} mg/dL",
            f"  Angiotensinogen: {self.angiotensinogen:.1f}",
        ])
