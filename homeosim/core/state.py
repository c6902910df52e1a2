from dataclasses import dataclass
from typing import Optional

from .constants import WAVEFORM_CAPACITY, MAX_EKG_LEADS


@dataclass
class SimulationConfig:
    """Configuration for patient construction and stepping."""
    rng_seed: Optional[int] = None  # None -> OS entropy
    heart_lead_count: int = MAX_EKG_LEADS
    waveform_capacity: int = WAVEFORM_CAPACITY  # samples per buffer


@dataclass(frozen=True)
class PatientSnapshot:
    """Immutable snapshot of headline vitals at a specific time."""
    time: float = 0.0

    # Blood
    spo2: float = 0.0  # %
    co2: float = 0.0  # mmHg
    glucose: float = 0.0  # mg/dL
    angiotensin: float = 0.0  # AU
    toxins: float = 0.0  # AU
    sbp: float = 0.0  # mmHg
    dbp: float = 0.0  # mmHg
    map: float = 0.0  # mmHg

    # Organ-derived (None when the organ is absent)
    hr: Optional[float] = None  # target bpm
    measured_hr: Optional[float] = None  # R-R derived bpm
    aortic_pressure: Optional[float] = None  # mmHg
    ejection_fraction: Optional[float] = None
    rr: Optional[float] = None  # breaths/min
    tidal_volume: Optional[float] = None  # mL
    etco2: Optional[float] = None  # mmHg
    gcs: Optional[int] = None
    icp: Optional[float] = None  # mmHg
    cpp: Optional[float] = None  # mmHg
    gfr: Optional[float] = None  # mL/min
    bladder_volume: Optional[float] = None  # mL
