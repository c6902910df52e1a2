import logging

from homeosim.core.enums import OrganType, StomachState
from homeosim.core.utils import require_finite
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import StomachConfig

logger = logging.getLogger(__name__)


class Stomach(Organ):
    """
    Empty -> Filling -> Digesting -> Emptying -> Empty.

    Food buffers gastric acid, capping pH at 4; digestion acidifies it at a fixed
    rate; emptying passes chyme to the intestines until the stomach is empty.
    """
    organ_type = OrganType.STOMACH

    def __init__(self, organ_id: int, config: StomachConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else StomachConfig()
        self.state = StomachState.EMPTY
        self.volume = 0.0  # mL
        self.ph = self.config.resting_ph
        self.acid_secretion_rate = 0.0  # mL/s
        self.time_in_state = 0.0
        self.chyme_delivered = 0.0

    @property
    def capacity(self) -> float:
        return self.config.capacity

    def _transition(self, state: StomachState):
        logger.debug("Stomach %s -> %s (%.0f mL, pH %.2f)", self.state.value, state.value, self.volume, self.ph)
        self.state = state
        self.time_in_state = 0.0

    def add_substance(self, volume: float) -> float:
        """Swallowed food or fluid. Returns the volume accepted (bounded by capacity)."""
        cfg = self.config
        volume = require_finite("substance volume", volume, minimum=0.0)
        accepted = min(volume, cfg.capacity - self.volume)
        if accepted < volume:
            logger.warning("Stomach full, %.1f mL not accepted", volume - accepted)
        self.volume += accepted
        self.ph = min(cfg.buffer_ceiling_ph, self.ph + cfg.buffer_step_ph)
        self._transition(StomachState.FILLING)
        return accepted

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        self.time_in_state += dt

        if self.state is StomachState.EMPTY:
            self.acid_secretion_rate = 0.0
            return

        # Gastric juice adds to the contents in every non-empty state
        if self.state is StomachState.DIGESTING:
            self.acid_secretion_rate = cfg.digestive_secretion
        else:
            self.acid_secretion_rate = cfg.basal_secretion
        self.volume = min(cfg.capacity, self.volume + self.acid_secretion_rate * dt)

        if self.state is StomachState.FILLING:
            if self.time_in_state >= cfg.fill_dwell:
                self._transition(StomachState.DIGESTING)
        elif self.state is StomachState.DIGESTING:
            self.ph = max(cfg.min_ph, self.ph - cfg.acid_rate * dt)
            if self.time_in_state >= cfg.digest_duration:
                self._transition(StomachState.EMPTYING)
        elif self.state is StomachState.EMPTYING:
            moved = min(cfg.emptying_rate * dt, self.volume)
            self.volume -= moved
            intestines = patient.get_organ(OrganType.INTESTINES)
            if intestines is not None and moved > 0:
                intestines.receive_chyme(moved)
                self.chyme_delivered += moved
            if self.volume <= 0.0:
                self.volume = 0.0
                self.ph = cfg.resting_ph
                self.acid_secretion_rate = 0.0
                self._transition(StomachState.EMPTY)

    def get_summary(self) -> str:
        return "\n".join([
            f"Stomach (ID {self.organ_id})",
            f"  State: {self.state.value}",
            f"  Volume: {self.volume:.1f} / {self.capacity:.0f} mL, pH {self.ph:.2f}",
            f"  Acid secretion: {self.acid_secretion_rate:.2f} mL/s",
        ])
