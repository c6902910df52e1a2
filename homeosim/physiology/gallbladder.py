import logging

from homeosim.core.enums import GallbladderState, OrganType
from homeosim.core.utils import require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import GallbladderConfig

logger = logging.getLogger(__name__)


class Gallbladder(Organ):
    """
    Storing <-> Contracting.

    While storing it collects hepatic bile and concentrates it (up to 10x).
    Contraction is either requested by the intestines through release_bile()
    or happens spontaneously on a fixed interval, and ends when the bladder
    empties or after a maximum duration.
    """
    organ_type = OrganType.GALLBLADDER

    def __init__(self, organ_id: int, config: GallbladderConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else GallbladderConfig()
        cfg = self.config
        self.state = GallbladderState.STORING
        self.stored_bile = cfg.initial_volume  # mL
        self.concentration = cfg.initial_concentration  # x hepatic bile
        self.time_since_contraction = 0.0
        self.contraction_time = 0.0
        self._spontaneous = False
        self.released_bile = 0.0

    @property
    def capacity(self) -> float:
        return self.config.capacity

    def _transition(self, state: GallbladderState):
        logger.debug("Gallbladder %s -> %s (%.1f mL)", self.state.value, state.value, self.stored_bile)
        self.state = state
        if state is GallbladderState.CONTRACTING:
            self.contraction_time = 0.0
        else:
            self.time_since_contraction = 0.0
            self._spontaneous = False

    def store_bile(self, volume: float) -> float:
        """Accept bile up to capacity while storing. Returns the volume accepted."""
        volume = require_finite("bile volume", volume, minimum=0.0)
        if self.state is not GallbladderState.STORING:
            return 0.0
        accepted = min(volume, self.capacity - self.stored_bile)
        self.stored_bile += accepted
        return accepted

    def release_bile(self, dt: float) -> float:
        """Contract and release up to ``release_rate * dt`` of stored bile. Returns the volume released."""
        dt = require_finite("dt", dt, minimum=0.0)
        if self.state is not GallbladderState.CONTRACTING:
            self._transition(GallbladderState.CONTRACTING)
        self._spontaneous = False
        released = self._drain(self.config.release_rate * dt)
        if self.stored_bile <= 0.0:
            self._finish_contraction()
        return released

    def _drain(self, amount: float) -> float:
        released = min(amount, self.stored_bile)
        self.stored_bile -= released
        self.released_bile += released
        return released

    def _finish_contraction(self):
        if self.stored_bile <= 0.0:
            self.stored_bile = 0.0
            self.concentration = 1.0
        self._transition(GallbladderState.STORING)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config

        if self.state is GallbladderState.STORING:
            liver = patient.get_organ(OrganType.LIVER)
            if liver is not None and dt > 0:
                self.store_bile(liver.bile_production_rate * dt)
            self.concentration = min(cfg.max_concentration, self.concentration + cfg.concentration_rate * dt)
            self.time_since_contraction += dt
            if self.time_since_contraction >= cfg.contraction_interval and self.stored_bile > cfg.spontaneous_floor:
                self._transition(GallbladderState.CONTRACTING)
                self._spontaneous = True
            return

        self.contraction_time += dt
        if self._spontaneous:
            self._drain(min(cfg.release_rate * dt, max(0.0, self.stored_bile - cfg.spontaneous_floor)))
            if self.stored_bile <= cfg.spontaneous_floor:
                self.concentration = 1.0
                self._finish_contraction()
                return
        if self.stored_bile <= 0.0 or self.contraction_time >= cfg.max_contraction:
            self._finish_contraction()

    def get_summary(self) -> str:
        return "\n".join([
            f"Gallbladder (ID {self.organ_id})",
            f"  State: {self.state.value}",
            f"  Stored bile: {self.stored_bile:.1f} / {self.capacity:.0f} mL at {self.concentration:.1f}x",
            f"  Released: {self.released_bile:.1f} mL",
        ])
