"""
Patient construction and the fixed-order simulation tick.
"""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from .constants import MAX_EKG_LEADS
from .enums import OrganType
from .state import PatientSnapshot, SimulationConfig
from homeosim.patient.patient import Patient
from homeosim.physiology.bladder import Bladder
from homeosim.physiology.brain import Brain, gcs_category
from homeosim.physiology.esophagus import Esophagus
from homeosim.physiology.gallbladder import Gallbladder
from homeosim.physiology.heart import Heart
from homeosim.physiology.intestines import Intestines
from homeosim.physiology.kidneys import Kidneys
from homeosim.physiology.liver import Liver
from homeosim.physiology.lungs import Lungs
from homeosim.physiology.pancreas import Pancreas
from homeosim.physiology.spinal_cord import SpinalCord
from homeosim.physiology.spleen import Spleen
from homeosim.physiology.stomach import Stomach

logger = logging.getLogger(__name__)

# Later organs read what earlier ones wrote in the same tick: secretors run
# before their consumers, the cardiopulmonary pair before the brain.
# Bump UPDATE_ORDER_VERSION whenever this sequence changes.
UPDATE_ORDER_VERSION = 1
UPDATE_ORDER: Tuple[OrganType, ...] = (
    # Secretors
    OrganType.LIVER,
    OrganType.PANCREAS,
    OrganType.GALLBLADDER,
    # Digestive consumers
    OrganType.ESOPHAGUS,
    OrganType.STOMACH,
    OrganType.INTESTINES,
    # Excretory
    OrganType.KIDNEYS,
    OrganType.BLADDER,
    # Autonomous
    OrganType.SPLEEN,
    OrganType.SPINAL_CORD,
    # Cardiopulmonary
    OrganType.HEART,
    OrganType.LUNGS,
    # Neurological
    OrganType.BRAIN,
)


def initialize_patient(patient_id: int, heart_lead_count: Optional[int] = None,
                       config: SimulationConfig = None,
                       rng: np.random.Generator = None) -> Patient:
    """
    Build a patient carrying one of each organ at healthy baseline.

    Args:
        patient_id: Identifier for the patient
        heart_lead_count: Number of EKG leads (1-12), overrides the config
        config: Optional settings; ``config.rng_seed`` seeds the noise source
        rng: Explicit generator, takes precedence over the seed

    Raises:
        ValueError: if the lead count is outside 1-12.
    """
    config = config if config is not None else SimulationConfig()
    lead_count = config.heart_lead_count if heart_lead_count is None else int(heart_lead_count)
    if not 1 <= lead_count <= MAX_EKG_LEADS:
        raise ValueError(f"Heart lead count must be between 1 and {MAX_EKG_LEADS}, got {lead_count}")

    if rng is None:
        rng = np.random.default_rng(config.rng_seed)
    patient = Patient(patient_id, rng=rng)

    capacity = config.waveform_capacity
    organs = (
        Heart(1, lead_count=lead_count, waveform_capacity=capacity),
        Lungs(2, waveform_capacity=capacity),
        Brain(3, waveform_capacity=capacity),
        Liver(4),
        Kidneys(5),
        Bladder(6),
        Stomach(7),
        Intestines(8),
        Gallbladder(9),
        Pancreas(10),
        Esophagus(11),
        Spleen(12),
        SpinalCord(13),
    )
    for organ in organs:
        patient.add_organ(organ)

    logger.info("Initialized patient %d with %d organs (%d EKG leads)",
                patient.id, len(patient), lead_count)
    return patient


def update_patient(patient: Patient, dt: float):
    """
    Advance the patient by ``dt`` seconds, one organ at a time in UPDATE_ORDER.

    Raises:
        ValueError: if dt is negative or not finite.
    """
    try:
        dt = float(dt)
    except (TypeError, ValueError):
        raise ValueError(f"dt must be a number, got {dt!r}")
    if not math.isfinite(dt) or dt < 0:
        raise ValueError(f"dt must be a finite, non-negative number of seconds, got {dt}")

    for kind in UPDATE_ORDER:
        organ = patient.get_organ(kind)
        if organ is not None:
            organ.update(patient, dt, patient.rng)
    patient.time += dt


def get_organ_summary(patient: Patient, organ_type_name: str) -> str:
    kind = OrganType.from_name(organ_type_name)
    organ = patient.get_organ(kind)
    if organ is None:
        return f"{kind.value}: not present"
    return organ.get_summary()


def get_patient_summary(patient: Patient) -> str:
    blood = patient.blood
    bp = blood.blood_pressure
    lines = [
        f"Patient {patient.id} (t = {patient.time:.1f} s)",
        f"  Blood pressure: {bp.systolic:.0f}/{bp.diastolic:.0f} mmHg (MAP {blood.mean_arterial_pressure:.0f})",
        f"  SpO2: {blood.oxygen_saturation:.1f}%, PaCO2: {blood.co2_partial_pressure:.1f} mmHg",
        f"  Glucose: {blood.glucose:.1f} mg/dL, angiotensin: {blood.angiotensin:.2f}, toxins: {blood.toxins:.1f}",
    ]
    brain = patient.get_organ(OrganType.BRAIN)
    if brain is not None:
        lines.append(f"  GCS: {brain.gcs_total} ({gcs_category(brain.gcs_total)})")
    summary = "\n".join(lines)
    sections = [summary] + [patient.get_organ(kind).get_summary() for kind in UPDATE_ORDER
                            if patient.has_organ(kind)]
    return "\n\n".join(sections)


def snapshot(patient: Patient) -> PatientSnapshot:
    """Freeze the headline vitals; organ-derived fields are None when the organ is absent."""
    blood = patient.blood
    heart: Optional[Heart] = patient.get_organ(OrganType.HEART)
    lungs: Optional[Lungs] = patient.get_organ(OrganType.LUNGS)
    brain: Optional[Brain] = patient.get_organ(OrganType.BRAIN)
    kidneys: Optional[Kidneys] = patient.get_organ(OrganType.KIDNEYS)
    bladder: Optional[Bladder] = patient.get_organ(OrganType.BLADDER)
    return PatientSnapshot(
        time=patient.time,
        spo2=blood.oxygen_saturation,
        co2=blood.co2_partial_pressure,
        glucose=blood.glucose,
        angiotensin=blood.angiotensin,
        toxins=blood.toxins,
        sbp=blood.blood_pressure.systolic,
        dbp=blood.blood_pressure.diastolic,
        map=blood.mean_arterial_pressure,
        hr=heart.heart_rate if heart else None,
        measured_hr=heart.measured_heart_rate if heart else None,
        aortic_pressure=heart.aortic_pressure if heart else None,
        ejection_fraction=heart.ejection_fraction if heart else None,
        rr=lungs.respiration_rate if lungs else None,
        tidal_volume=lungs.tidal_volume if lungs else None,
        etco2=lungs.etco2 if lungs else None,
        gcs=brain.gcs_total if brain else None,
        icp=brain.intracranial_pressure if brain else None,
        cpp=brain.cerebral_perfusion_pressure if brain else None,
        gfr=kidneys.gfr if kidneys else None,
        bladder_volume=bladder.volume if bladder else None,
    )
