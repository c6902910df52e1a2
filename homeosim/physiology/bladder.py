import logging

from homeosim.core.enums import BladderState, OrganType
from homeosim.core.utils import require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import BladderConfig

logger = logging.getLogger(__name__)


class Bladder(Organ):
    """
    Filling -> Full -> Voiding -> Filling.

    Pressure rises linearly with fill fraction. Urine arriving while voiding
    is not stored; the dropped volume is tallied in ``rejected_urine``.
    """
    organ_type = OrganType.BLADDER

    def __init__(self, organ_id: int, config: BladderConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else BladderConfig()
        cfg = self.config
        self.state = BladderState.FILLING
        self.volume = cfg.initial_volume  # mL
        self.pressure = self._pressure_for(self.volume)  # cmH2O
        self.time_in_state = 0.0
        self.voided_volume = 0.0
        self.rejected_urine = 0.0

    @property
    def capacity(self) -> float:
        return self.config.capacity

    def _pressure_for(self, volume: float) -> float:
        return volume / self.config.capacity * self.config.max_pressure

    def _transition(self, state: BladderState):
        logger.debug("Bladder %s -> %s at %.0f mL", self.state.value, state.value, self.volume)
        self.state = state
        self.time_in_state = 0.0

    def add_urine(self, volume: float) -> float:
        """
        Store incoming urine up to capacity. Returns the volume accepted.

        Ignored while voiding.
        """
        volume = require_finite("urine volume", volume, minimum=0.0)
        if self.state is BladderState.VOIDING:
            self.rejected_urine += volume
            return 0.0
        accepted = min(volume, self.capacity - self.volume)
        self.volume += accepted
        self.pressure = self._pressure_for(self.volume)
        return accepted

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        self.time_in_state += dt

        if self.state is BladderState.FILLING:
            if self.volume > cfg.full_fraction * cfg.capacity or self.pressure > cfg.pressure_threshold:
                self._transition(BladderState.FULL)
        elif self.state is BladderState.FULL:
            if self.time_in_state >= cfg.full_dwell:
                self._transition(BladderState.VOIDING)
        elif self.state is BladderState.VOIDING:
            drained = min(cfg.void_rate * dt, self.volume)
            self.volume -= drained
            self.voided_volume += drained
            if self.volume <= 0.0:
                self.volume = 0.0
                self._transition(BladderState.FILLING)

        self.volume = min(max(self.volume, 0.0), cfg.capacity)
        self.pressure = self._pressure_for(self.volume)

    def get_summary(self) -> str:
        return "\n".join([
            f"Bladder (ID {self.organ_id})",
            f"  State: {self.state.value}",
            f"  Volume: {self.volume:.1f} / {self.capacity:.0f} mL, pressure {self.pressure:.1f} cmH2O",
            f"  Voided: {self.voided_volume:.0f} mL, rejected while voiding: {self.rejected_urine:.1f} mL",
        ])
