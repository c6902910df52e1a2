"""
Breath mechanics, gas exchange, capnography and lung injury.
"""

import pytest

from homeosim.core.enums import BreathPhase, CapnoPhase, VentilationMode
from homeosim.physiology.lungs import Lungs


@pytest.fixture
def lungs():
    return Lungs(2)


def breathe(lungs, patient, seconds, dt=0.05):
    for _ in range(int(seconds / dt)):
        lungs.update(patient, dt, patient.rng)


class TestBreathMechanics:
    def test_baseline_tidal_volume(self, lungs, patient_with):
        p = patient_with(lungs)
        breathe(lungs, p, 30.0)
        assert 440.0 < lungs.tidal_volume < 560.0, f"TV {lungs.tidal_volume} far from 500 mL"

    def test_inspiration_fraction(self, lungs, patient_with):
        p = patient_with(lungs)
        phases = []
        for _ in range(375):  # one 3.75 s breath at 16 /min
            lungs.update(p, 0.01, p.rng)
            phases.append(lungs.phase)
        insp = phases.count(BreathPhase.INSPIRATION) / len(phases)
        assert insp == pytest.approx(0.4, abs=0.02)

    def test_volume_within_half_capacity(self, lungs, patient_with):
        p = patient_with(lungs)
        lungs.set_rate(4.0)
        for _ in range(100):
            lungs.update(p, 0.5, p.rng)
            assert 0.0 <= lungs.lung_volume <= lungs.total_capacity / 2
            assert 0.0 <= lungs.tidal_volume <= lungs.total_capacity / 2

    def test_set_rate_validation(self, lungs):
        with pytest.raises(ValueError):
            lungs.set_rate(-1.0)
        lungs.set_rate(100.0)
        assert lungs.respiration_rate == lungs.config.rr_max


class TestLungInjury:
    def test_damage_scales_all_lobes(self, lungs):
        before = [lobe.compliance for lobe in lungs.lobes]
        lungs.inflict_damage(0.25)
        for old, lobe in zip(before, lungs.lobes):
            assert lobe.compliance == pytest.approx(old * 0.75)

    def test_damage_reduces_tidal_volume(self, lungs, patient_with):
        p = patient_with(lungs)
        breathe(lungs, p, 20.0)
        healthy = lungs.tidal_volume
        lungs.inflict_damage(0.5)
        breathe(lungs, p, 20.0)
        assert lungs.tidal_volume < 0.6 * healthy

    def test_damage_is_irreversible(self, lungs, patient_with):
        p = patient_with(lungs)
        lungs.inflict_damage(0.5)
        compliance = lungs.total_compliance
        breathe(lungs, p, 60.0, dt=1.0)
        assert lungs.total_compliance == pytest.approx(compliance)

    @pytest.mark.parametrize("fraction", [-0.1, 1.5, float("nan")])
    def test_invalid_fraction(self, lungs, fraction):
        with pytest.raises(ValueError):
            lungs.inflict_damage(fraction)


class TestGasExchange:
    def test_hypoventilation_lowers_spo2_and_raises_co2(self, lungs, patient_with):
        p = patient_with(lungs)
        lungs.inflict_damage(0.6)
        breathe(lungs, p, 120.0, dt=0.1)
        assert lungs.spo2 < 90.0
        assert lungs.etco2 > 45.0
        assert p.blood.co2_partial_pressure > 45.0
        assert p.blood.oxygen_saturation < 95.0

    def test_ventilation_factor(self, lungs):
        lungs.tidal_volume = 250.0
        lungs.respiration_rate = 32.0
        assert lungs.ventilation_factor == pytest.approx(1.0)


class TestCapnography:
    def test_phases_over_one_breath(self, lungs, patient_with):
        p = patient_with(lungs)
        seen = set()
        for _ in range(375):
            lungs.update(p, 0.01, p.rng)
            seen.add(lungs.capnograph.state.phase)
            if lungs.phase is BreathPhase.INSPIRATION:
                assert lungs.capnogram.latest == 0.0
        assert seen == set(CapnoPhase)

    def test_plateau_at_etco2(self, lungs, zero_rng):
        value = lungs.capnograph.step(0.65, 40.0, zero_rng)
        assert value == pytest.approx(40.0)
        assert lungs.capnograph.state.phase is CapnoPhase.ALVEOLAR_PLATEAU

    def test_linear_upstroke_and_downstroke(self, lungs, zero_rng):
        assert lungs.capnograph.step(0.45, 40.0, zero_rng) == pytest.approx(20.0)
        assert lungs.capnograph.step(0.9, 40.0, zero_rng) == pytest.approx(20.0)


class TestVentilationMode:
    def test_spontaneous_reports_no_airway_pressure(self, lungs, patient_with):
        p = patient_with(lungs)
        breathe(lungs, p, 10.0)
        assert lungs.ventilation_mode is VentilationMode.SPONTANEOUS
        assert lungs.peak_inspiratory_pressure == 0.0

    def test_mechanical_reports_peak_pressure(self, lungs, patient_with):
        p = patient_with(lungs)
        lungs.set_mechanical_ventilation(True)
        breathe(lungs, p, 10.0, dt=0.01)
        assert lungs.peak_inspiratory_pressure == pytest.approx(15.0, abs=0.5)
