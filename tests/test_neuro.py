"""
Brain scoring and autonomic control, and spinal cord tract behaviour.
"""

import pytest

from homeosim.core.enums import OrganType, TractStatus
from homeosim.core.engine import update_patient
from homeosim.physiology.brain import Brain, gcs_category, score_gcs
from homeosim.physiology.heart import Heart
from homeosim.physiology.lungs import Lungs
from homeosim.physiology.spinal_cord import SpinalCord


class TestGlasgowComaScale:
    def test_healthy_scores_fifteen(self):
        assert score_gcs(spo2=98, co2=40, cpp=80, toxins=0).total == 15

    def test_hypoxia_lowers_every_component(self):
        score = score_gcs(spo2=70, co2=40, cpp=80, toxins=0)
        assert score.eye < 4 and score.verbal < 5 and score.motor < 6

    def test_low_perfusion(self):
        score = score_gcs(spo2=98, co2=40, cpp=30, toxins=0)
        assert score.eye == 2  # SpO2 > 80 still opens to pain
        assert score.motor == 4

    def test_moderate_toxins_cap(self):
        score = score_gcs(spo2=98, co2=40, cpp=80, toxins=60)
        assert (score.eye, score.verbal, score.motor) == (2, 3, 4)

    def test_severe_toxins_cap(self):
        score = score_gcs(spo2=98, co2=40, cpp=80, toxins=90)
        assert (score.eye, score.verbal, score.motor) == (1, 2, 3)
        assert score.total == 6

    def test_motor_pathway_and_ventilation_overrides(self):
        score = score_gcs(spo2=98, co2=40, cpp=80, toxins=0, motor_tract_normal=False, ventilated=True)
        assert score.motor == 1
        assert score.verbal == 1

    @pytest.mark.parametrize("total,category", [(3, "Severe"), (8, "Severe"), (9, "Moderate"),
                                                (12, "Moderate"), (13, "Minor"), (15, "Minor")])
    def test_categories(self, total, category):
        assert gcs_category(total) == category


class TestBrainIntegration:
    def test_motor_tract_damage_forces_motor_one(self, quiet_patient):
        cord = quiet_patient.get_organ(OrganType.SPINAL_CORD)
        brain = quiet_patient.get_organ(OrganType.BRAIN)
        update_patient(quiet_patient, 1.0)
        assert brain.gcs.motor == 6

        cord.impair_tract("motor", 0.2)
        update_patient(quiet_patient, 1.0)
        assert brain.gcs.motor == 1

    def test_mechanical_ventilation_forces_verbal_one(self, quiet_patient):
        lungs = quiet_patient.get_organ(OrganType.LUNGS)
        brain = quiet_patient.get_organ(OrganType.BRAIN)
        lungs.set_mechanical_ventilation(True)
        update_patient(quiet_patient, 0.5)
        assert brain.gcs.verbal == 1

    def test_cpp_uses_heart_aortic_pressure(self, patient_with):
        heart = Heart(1)
        brain = Brain(3)
        p = patient_with(heart, brain)
        heart.update(p, 0.3, p.rng)
        brain.update(p, 0.3, p.rng)
        assert brain.mean_arterial_pressure == heart.aortic_pressure
        expected = max(0.0, heart.aortic_pressure - brain.intracranial_pressure)
        assert brain.cerebral_perfusion_pressure == pytest.approx(expected)

    def test_fallback_map_without_heart(self, patient):
        patient.remove_organ(OrganType.HEART)
        brain = patient.get_organ(OrganType.BRAIN)
        for _ in range(100):
            update_patient(patient, 1.0)
            assert 85.0 <= brain.mean_arterial_pressure <= 95.0
            assert 8.0 <= brain.intracranial_pressure <= 12.0

    def test_metabolism_consumes_oxygen(self, patient_with):
        brain = Brain(3)
        p = patient_with(brain)
        brain.update(p, 10.0, p.rng)
        assert p.blood.oxygen_saturation < 98.0
        assert p.blood.co2_partial_pressure > 40.0


class TestAutonomicControl:
    def test_hypercapnia_raises_respiration(self, patient_with):
        lungs = Lungs(2)
        brain = Brain(3)
        p = patient_with(lungs, brain)
        p.blood.co2_partial_pressure = 60.0
        brain.update(p, 1.0, p.rng)
        assert lungs.respiration_rate > 16.0

    def test_respiration_clamped(self, patient_with):
        lungs = Lungs(2)
        brain = Brain(3)
        p = patient_with(lungs, brain)
        p.blood.co2_partial_pressure = 150.0
        p.blood.oxygen_saturation = 10.0
        brain.update(p, 60.0, p.rng)
        assert lungs.respiration_rate == pytest.approx(35.0)

    def test_hypotension_raises_heart_rate(self, patient_with):
        heart = Heart(1)
        brain = Brain(3)
        p = patient_with(heart, brain)
        p.blood.blood_pressure.systolic = 90.0
        p.blood.blood_pressure.diastolic = 60.0
        brain.update(p, 1.0, p.rng)
        assert heart.heart_rate > 75.0

    def test_heart_rate_clamped(self, patient_with):
        heart = Heart(1)
        brain = Brain(3)
        p = patient_with(heart, brain)
        p.blood.blood_pressure.systolic = 40.0
        p.blood.blood_pressure.diastolic = 20.0
        brain.update(p, 60.0, p.rng)
        assert heart.heart_rate <= 160.0

    def test_eeg_trace(self, patient_with):
        brain = Brain(3)
        p = patient_with(brain)
        for _ in range(250):
            brain.update(p, 0.01, p.rng)
        assert len(brain.eeg_trace) == 200
        assert max(abs(v) for v in brain.eeg_trace) <= 0.8 * 20 + 1e-9


class TestSpinalCord:
    def test_reflex_arc(self):
        cord = SpinalCord(13)
        assert cord.reflex_arc_intact
        cord.set_tract_status("sensory", TractStatus.IMPAIRED)
        assert not cord.reflex_arc_intact

    def test_velocity_bands(self, patient):
        cord = SpinalCord(13)
        for _ in range(500):
            cord.update(patient, 1.0, patient.rng)
            assert 70.0 <= cord.tracts["motor"].conduction_velocity <= 80.0
            assert 60.0 <= cord.tracts["sensory"].conduction_velocity <= 70.0

    def test_sever(self, patient_with):
        cord = SpinalCord(13)
        p = patient_with(cord)
        cord.sever_tract("motor")
        cord.update(p, 1.0, p.rng)
        assert cord.motor_status is TractStatus.SEVERED
        assert cord.tracts["motor"].conduction_velocity == 0.0

    def test_impairment_accumulates_to_severed(self):
        cord = SpinalCord(13)
        cord.impair_tract("sensory", 0.6)
        assert cord.get_tract_status("sensory") is TractStatus.IMPAIRED
        cord.impair_tract("sensory", 0.6)
        assert cord.get_tract_status("sensory") is TractStatus.SEVERED

    def test_unknown_tract(self):
        with pytest.raises(ValueError):
            SpinalCord(13).sever_tract("autonomic")
