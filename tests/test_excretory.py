"""
Liver, kidneys and bladder: clearance, glucose regulation, the
renin-angiotensin loop and the bladder fill/void cycle.
"""

import math

import pytest

from homeosim.core.enums import BladderState
from homeosim.physiology.bladder import Bladder
from homeosim.physiology.heart import Heart
from homeosim.physiology.kidneys import Kidneys
from homeosim.physiology.liver import Liver


class TestLiver:
    def test_toxin_clearance(self, patient_with):
        liver = Liver(4)
        p = patient_with(liver)
        p.blood.toxins = 100.0
        liver.update(p, 1.0, p.rng)
        assert p.blood.toxins == pytest.approx(100.0 * math.exp(-0.1))

    def test_glucose_pulled_down_from_hyperglycemia(self, patient_with):
        liver = Liver(4)
        p = patient_with(liver)
        p.blood.glucose = 200.0
        liver.update(p, 1.0, p.rng)
        assert 120.0 < p.blood.glucose < 200.0

    def test_glucose_pushed_up_from_hypoglycemia(self, patient_with):
        liver = Liver(4)
        p = patient_with(liver)
        p.blood.glucose = 50.0
        liver.update(p, 1.0, p.rng)
        assert 50.0 < p.blood.glucose < 80.0

    def test_glucose_in_band_untouched(self, patient_with):
        liver = Liver(4)
        p = patient_with(liver)
        liver.update(p, 10.0, p.rng)
        assert p.blood.glucose == 90.0

    def test_damage_reduces_capacity(self, patient_with):
        liver = Liver(4)
        p = patient_with(liver)
        liver.inflict_damage(0.5)
        assert liver.capacity == pytest.approx(0.5)
        assert liver.angiotensinogen == pytest.approx(5.0)
        for _ in range(200):
            liver.update(p, 1.0, p.rng)
        assert liver.alt > 100.0
        assert liver.bile_production_rate < 0.0069

    def test_damage_validation(self):
        with pytest.raises(ValueError):
            Liver(4).inflict_damage(2.0)


class TestKidneys:
    def test_urine_reaches_bladder(self, patient_with):
        kidneys = Kidneys(5)
        bladder = Bladder(6)
        p = patient_with(kidneys, bladder)
        kidneys.update(p, 10.0, p.rng)
        assert bladder.volume > 50.0
        assert bladder.volume - 50.0 == pytest.approx(kidneys.total_urine)

    def test_gfr_tracks_capacity(self, patient_with):
        kidneys = Kidneys(5)
        p = patient_with(kidneys)
        kidneys.damage_nephrons(0.5)
        for _ in range(100):
            kidneys.update(p, 1.0, p.rng)
        assert kidneys.gfr == pytest.approx(62.5, abs=1.0)
        assert kidneys.creatinine > kidneys.config.creatinine_baseline

    def test_hypotension_releases_renin_and_angiotensin(self, patient_with):
        kidneys = Kidneys(5)
        p = patient_with(Heart(1), kidneys)
        p.blood.blood_pressure.systolic = 90.0
        p.blood.blood_pressure.diastolic = 60.0
        kidneys.update(p, 1.0, p.rng)
        assert kidneys.renin == pytest.approx(1.0 + 15.0 * 0.1)
        assert p.blood.angiotensin > 1.0

    def test_renin_decays_to_baseline(self, patient_with):
        kidneys = Kidneys(5)
        p = patient_with(Heart(1), kidneys)
        kidneys.renin = 10.0
        for _ in range(200):
            kidneys.update(p, 1.0, p.rng)
        assert kidneys.renin == pytest.approx(1.0, abs=0.01)

    def test_missing_heart_uses_default_pressure(self, patient_with):
        kidneys = Kidneys(5)
        p = patient_with(kidneys)
        p.blood.blood_pressure.systolic = 60.0
        p.blood.blood_pressure.diastolic = 40.0
        kidneys.update(p, 1.0, p.rng)
        assert kidneys.perfusion_pressure == 90.0
        assert kidneys.renin == pytest.approx(1.0)

    def test_raas_closes_loop_through_heart(self, patient_with):
        """Sustained hypotension raises angiotensin, which raises arterial pressure."""
        heart = Heart(1)
        kidneys = Kidneys(5)
        p = patient_with(kidneys, heart)
        p.blood.blood_pressure.systolic = 80.0
        p.blood.blood_pressure.diastolic = 50.0
        kidneys.update(p, 5.0, p.rng)
        heart.update(p, 0.0, p.rng)
        assert p.blood.blood_pressure.systolic > 120.0


class TestBladder:
    def test_add_urine_caps_at_capacity(self):
        bladder = Bladder(6)
        for _ in range(500):
            bladder.add_urine(1.0)
            assert bladder.volume <= bladder.capacity
        assert bladder.volume == pytest.approx(500.0)

    def test_full_then_voiding_then_filling(self, patient_with):
        bladder = Bladder(6)
        p = patient_with(bladder)
        for _ in range(500):
            bladder.add_urine(1.0)
        bladder.update(p, 1.0, p.rng)
        assert bladder.state is BladderState.FULL

        for _ in range(10):
            bladder.update(p, 1.0, p.rng)
        assert bladder.state is BladderState.VOIDING

        volume = bladder.volume
        assert bladder.add_urine(25.0) == 0.0
        assert bladder.volume == volume
        assert bladder.rejected_urine == pytest.approx(25.0)

        for _ in range(40):
            bladder.update(p, 1.0, p.rng)
            if bladder.state is BladderState.FILLING:
                break
        assert bladder.state is BladderState.FILLING
        assert bladder.volume == 0.0
        assert bladder.add_urine(5.0) == 5.0

    def test_pressure_linear_in_volume(self):
        bladder = Bladder(6)
        assert bladder.pressure == pytest.approx(6.0)
        bladder.add_urine(200.0)
        assert bladder.pressure == pytest.approx(30.0)

    def test_pressure_threshold_triggers_full(self, patient_with):
        bladder = Bladder(6)
        p = patient_with(bladder)
        bladder.add_urine(300.0)  # 350 mL -> 42 cmH2O, below 80% volume
        bladder.update(p, 1.0, p.rng)
        assert bladder.state is BladderState.FULL

    def test_rejects_negative_volume(self):
        with pytest.raises(ValueError):
            Bladder(6).add_urine(-1.0)
