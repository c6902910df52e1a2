import logging
from typing import Dict, Optional

import numpy as np

from homeosim.core.enums import OrganType
from homeosim.patient.blood import Blood
from homeosim.physiology.organ import Organ

logger = logging.getLogger(__name__)


class Patient:
    """
    A single simulated patient: shared Blood, one slot per organ kind and the
    random generator that drives every stochastic term.
    """
    def __init__(self, patient_id: int, blood: Blood = None,
                 rng: np.random.Generator = None):
        self.id = int(patient_id)
        self.blood = blood if blood is not None else Blood()
        # Use provided RNG for reproducibility, or create default
        self.rng = rng if rng is not None else np.random.default_rng()
        self.time = 0.0  # simulated seconds
        self._organs: Dict[OrganType, Organ] = {}

    def add_organ(self, organ: Organ) -> Organ:
        kind = organ.organ_type
        if not isinstance(kind, OrganType):
            raise ValueError(f"{organ!r} has no organ type")
        if kind in self._organs:
            raise ValueError(f"Patient {self.id} already has a {kind.value}")
        self._organs[kind] = organ
        return organ

    def remove_organ(self, kind: OrganType) -> Optional[Organ]:
        organ = self._organs.pop(kind, None)
        if organ is not None:
            logger.info("Removed %s from patient %d", kind.value, self.id)
        return organ

    def get_organ(self, kind: OrganType) -> Optional[Organ]:
        """Organ of the given kind, or None when the patient lacks it."""
        return self._organs.get(kind)

    def has_organ(self, kind: OrganType) -> bool:
        return kind in self._organs

    def __len__(self):
        return len(self._organs)
