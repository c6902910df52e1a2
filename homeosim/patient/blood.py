import logging
from dataclasses import dataclass, field

from homeosim.core import constants as C
from homeosim.core.utils import clamp, require_finite

logger = logging.getLogger(__name__)


@dataclass
class BloodPressure:
    systolic: float = C.SBP_BASELINE  # mmHg
    diastolic: float = C.DBP_BASELINE  # mmHg


@dataclass
class Blood:
    """
    Shared circulating state read and written by every organ.

    Writers call clamp() before returning so the record never leaves its
    physiological bounds between organ updates.
    """
    oxygen_saturation: float = C.SPO2_BASELINE  # %
    co2_partial_pressure: float = C.CO2_BASELINE  # mmHg
    glucose: float = C.GLUCOSE_BASELINE  # mg/dL
    angiotensin: float = C.ANGIOTENSIN_BASELINE  # AU
    toxins: float = 0.0  # AU
    blood_pressure: BloodPressure = field(default_factory=BloodPressure)

    @property
    def mean_arterial_pressure(self) -> float:
        bp = self.blood_pressure
        return bp.diastolic + (bp.systolic - bp.diastolic) / 3.0

    def clamp(self) -> "Blood":
        self.oxygen_saturation = clamp(self.oxygen_saturation, C.SPO2_MIN, C.SPO2_MAX)
        self.co2_partial_pressure = clamp(self.co2_partial_pressure, C.CO2_MIN, C.CO2_MAX)
        self.glucose = clamp(self.glucose, C.GLUCOSE_MIN, C.GLUCOSE_MAX)
        self.angiotensin = clamp(self.angiotensin, C.ANGIOTENSIN_MIN, C.ANGIOTENSIN_MAX)
        self.toxins = clamp(self.toxins, C.TOXINS_MIN, C.TOXINS_MAX)
        bp = self.blood_pressure
        bp.systolic = clamp(bp.systolic, C.SBP_MIN, C.SBP_MAX)
        bp.diastolic = clamp(bp.diastolic, C.DBP_MIN, C.DBP_MAX)
        return self

    def add_toxins(self, amount: float):
        """Inject circulating toxins (e.g. an ingestion or sepsis scenario)."""
        amount = require_finite("toxin amount", amount, minimum=0.0)
        self.toxins += amount
        if self.toxins > C.TOXINS_MAX:
            logger.warning("Toxin load clamped at %.0f AU", C.TOXINS_MAX)
        self.clamp()
        logger.info("Added %.1f AU toxins (now %.1f)", amount, self.toxins)

    def within_bounds(self) -> bool:
        bp = self.blood_pressure
        return (
            C.SPO2_MIN <= self.oxygen_saturation <= C.SPO2_MAX
            and C.CO2_MIN <= self.co2_partial_pressure <= C.CO2_MAX
            and C.GLUCOSE_MIN <= self.glucose <= C.GLUCOSE_MAX
            and C.ANGIOTENSIN_MIN <= self.angiotensin <= C.ANGIOTENSIN_MAX
            and C.TOXINS_MIN <= self.toxins <= C.TOXINS_MAX
            and C.SBP_MIN <= bp.systolic <= C.SBP_MAX
            and C.DBP_MIN <= bp.diastolic <= C.DBP_MAX
        )
