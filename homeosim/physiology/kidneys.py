import logging
from dataclasses import dataclass
from typing import List

from homeosim.core.constants import DEFAULT_MAP
from homeosim.core.enums import OrganType
from homeosim.core.utils import approach, clamp, mean_revert, require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import KidneysConfig

logger = logging.getLogger(__name__)


@dataclass
class Nephron:
    filtration: float = 1.0
    damaged: bool = False


class Kidneys(Organ):
    """
    Filtration, urine output and the renin-angiotensin loop.

    GFR tracks 125 mL/min scaled by nephron capacity and renal perfusion.
    Renin rises when arterial pressure drops below 85 mmHg and, together with
    hepatic angiotensinogen, sets circulating angiotensin, which the heart
    turns into vasoconstriction.
    """
    organ_type = OrganType.KIDNEYS

    def __init__(self, organ_id: int, config: KidneysConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else KidneysConfig()
        cfg = self.config
        if cfg.nephron_count <= 0:
            raise ValueError("Kidneys need at least one nephron")
        self.nephrons: List[Nephron] = [Nephron() for _ in range(cfg.nephron_count)]
        self.gfr = cfg.gfr_baseline  # mL/min
        self.urine_output_rate = cfg.gfr_baseline * cfg.urine_per_gfr  # mL/s
        self.sodium = cfg.sodium
        self.potassium = cfg.potassium
        self.renin = cfg.renin_baseline
        self.perfusion_pressure = DEFAULT_MAP
        self.creatinine = cfg.creatinine_baseline
        self.bun = cfg.bun_baseline
        self.total_urine = 0.0  # mL delivered to the bladder

    @property
    def capacity(self) -> float:
        healthy = sum(n.filtration for n in self.nephrons if not n.damaged)
        return healthy / len(self.nephrons)

    def damage_nephrons(self, fraction: float):
        """Mark ``fraction`` of all nephrons (healthy ones first) as non-filtering."""
        fraction = require_finite("damage fraction", fraction)
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Damage fraction must be within [0, 1], got {fraction}")
        count = int(round(fraction * len(self.nephrons)))
        for nephron in self.nephrons:
            if count <= 0:
                break
            if not nephron.damaged:
                nephron.damaged = True
                count -= 1
        logger.info("Kidney capacity now %.2f", self.capacity)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        blood = patient.blood

        if patient.get_organ(OrganType.HEART) is not None:
            self.perfusion_pressure = blood.mean_arterial_pressure
        else:
            self.perfusion_pressure = DEFAULT_MAP
        pressure_modifier = clamp(self.perfusion_pressure / cfg.reference_map, *cfg.pressure_modifier_band)

        self.gfr = mean_revert(
            self.gfr, cfg.gfr_baseline * self.capacity * pressure_modifier, cfg.gfr_theta,
            cfg.gfr_noise, dt, cfg.gfr_min, cfg.gfr_max, rng,
        )
        self.urine_output_rate = mean_revert(
            self.urine_output_rate, self.gfr * cfg.urine_per_gfr, cfg.urine_theta,
            cfg.urine_noise, dt, *cfg.urine_band, rng,
        )
        self.sodium = mean_revert(
            self.sodium, cfg.sodium, cfg.electrolyte_theta, cfg.sodium_noise, dt, *cfg.sodium_band, rng,
        )
        self.potassium = mean_revert(
            self.potassium, cfg.potassium, cfg.electrolyte_theta, cfg.potassium_noise, dt,
            *cfg.potassium_band, rng,
        )

        deficit = max(0.0, 1.0 - self.gfr / cfg.reference_gfr)
        self.creatinine = cfg.creatinine_baseline + deficit * cfg.creatinine_gain
        self.bun = cfg.bun_baseline + deficit * cfg.bun_gain

        # Renin-angiotensin
        if self.perfusion_pressure < cfg.renin_map_threshold:
            self.renin += (cfg.renin_map_threshold - self.perfusion_pressure) * cfg.renin_gain * dt
        else:
            self.renin = approach(self.renin, cfg.renin_baseline, cfg.renin_decay, dt)
        self.renin = clamp(self.renin, *cfg.renin_band)

        liver = patient.get_organ(OrganType.LIVER)
        substrate = 1.0
        if liver is not None:
            substrate = liver.angiotensinogen / cfg.reference_angiotensinogen
        blood.angiotensin = approach(blood.angiotensin, self.renin * substrate, cfg.angiotensin_rate, dt)
        blood.clamp()

        urine = self.urine_output_rate * dt
        bladder = patient.get_organ(OrganType.BLADDER)
        if bladder is not None and urine > 0:
            bladder.add_urine(urine)
        self.total_urine += urine

    def get_summary(self) -> str:
        return "\n".join([
            f"Kidneys (ID {self.organ_id})",
            f"  GFR: {self.gfr:.1f} mL/min (capacity {self.capacity * 100:.0f}%)",
            f"  Urine output: {self.urine_output_rate * 3600:.1f} mL/h",
            f"  Na {self.sodium:.1f} mmol/L, K {self.potassium:.2f} mmol/L",
            f"  Creatinine {self.creatinine:.2f} mg/dL, BUN {self.bun:.1f} mg/dL",
            f"  Renin: {self.renin:.2f}",
        ])
