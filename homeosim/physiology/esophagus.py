import logging
from dataclasses import dataclass
from typing import List

from homeosim.core.enums import EsophagusState, OrganType
from homeosim.core.utils import mean_revert, require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import EsophagusConfig

logger = logging.getLogger(__name__)


@dataclass
class Bolus:
    volume: float  # mL
    position: float = 0.0  # cm from the upper sphincter


class Esophagus(Organ):
    """Peristaltic transport of swallowed boli down to the stomach."""
    organ_type = OrganType.ESOPHAGUS

    def __init__(self, organ_id: int, config: EsophagusConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else EsophagusConfig()
        self.state = EsophagusState.IDLE
        self.motility = self.config.motility
        self.boli: List[Bolus] = []
        self.delivered_volume = 0.0

    @property
    def length(self) -> float:
        return self.config.length

    def initiate_swallow(self, volume: float) -> Bolus:
        volume = require_finite("bolus volume", volume)
        if volume <= 0:
            raise ValueError(f"Bolus volume must be positive, got {volume}")
        bolus = Bolus(volume)
        self.boli.append(bolus)
        self.state = EsophagusState.CONTRACTING
        logger.debug("Swallow initiated: %.1f mL", volume)
        return bolus

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        self.motility = mean_revert(
            self.motility, cfg.motility, cfg.motility_theta, cfg.motility_noise,
            dt, *cfg.motility_band, rng,
        )

        advance = cfg.peristaltic_speed * self.motility * dt
        stomach = patient.get_organ(OrganType.STOMACH)
        remaining = []
        for bolus in self.boli:
            bolus.position += advance
            if bolus.position < cfg.length:
                remaining.append(bolus)
                continue
            if stomach is not None:
                self.delivered_volume += stomach.add_substance(bolus.volume)
            else:
                logger.debug("No stomach, %.1f mL bolus lost", bolus.volume)
        self.boli = remaining
        self.state = EsophagusState.CONTRACTING if self.boli else EsophagusState.IDLE

    def get_summary(self) -> str:
        return "\n".join([
            f"Esophagus (ID {self.organ_id})",
            f"  State: {self.state.value}, motility {self.motility:.3f}",
            f"  Boli in transit over {self.length:.0f} cm: {len(self.boli)}, delivered {self.delivered_volume:.0f} mL",
        ])
