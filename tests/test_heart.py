"""
Cardiac cycle mechanics: phases, valve gating, aortic pressure, ejection
fraction, R-peak rate measurement and the multi-lead EKG.
"""

import numpy as np
import pytest

from homeosim.core.enums import CardiacPhase
from homeosim.physiology.heart import Heart
from homeosim.physiology.organ_config import HeartConfig


@pytest.fixture
def heart():
    return Heart(1, config=HeartConfig(hr_noise=0.0))


class TestCardiacCycle:
    def test_phase_boundaries(self, heart):
        assert heart.phase_for(0.0) is CardiacPhase.ATRIAL_SYSTOLE
        assert heart.phase_for(0.149) is CardiacPhase.ATRIAL_SYSTOLE
        assert heart.phase_for(0.17) is CardiacPhase.DIASTOLE
        assert heart.phase_for(0.20) is CardiacPhase.VENTRICULAR_SYSTOLE
        assert heart.phase_for(0.499) is CardiacPhase.VENTRICULAR_SYSTOLE
        assert heart.phase_for(0.5) is CardiacPhase.DIASTOLE

    def test_period_follows_rate(self, heart):
        heart.set_rate(60.0)
        assert heart.period == pytest.approx(1.0)

    def test_volumes_stay_clamped(self, heart, patient_with):
        p = patient_with(heart)
        for _ in range(500):
            heart.update(p, 0.01, p.rng)
            assert 40.0 <= heart.lv_volume <= 130.0
            assert 40.0 <= heart.rv_volume <= 130.0

    def test_valves_follow_pressure_gradients(self, heart, patient_with):
        p = patient_with(heart)
        for _ in range(300):
            heart.update(p, 0.005, p.rng)
            pr = heart.pressures
            assert heart.valves.mitral == (pr.left_atrium > pr.left_ventricle)
            assert heart.valves.tricuspid == (pr.right_atrium > pr.right_ventricle)
            assert heart.valves.pulmonary == (pr.right_ventricle > heart.config.pulmonary_artery_pressure)


class TestAorticPressure:
    def test_tracks_ventricle_when_open_and_decays_when_closed(self, heart, patient_with):
        p = patient_with(heart)
        previous = heart.get_aortic_pressure()
        open_ticks = closed_ticks = 0
        for _ in range(2000):
            heart.update(p, 0.005, p.rng)
            aortic = heart.get_aortic_pressure()
            if heart.valves.aortic:
                open_ticks += 1
                assert aortic == heart.pressures.left_ventricle
            else:
                closed_ticks += 1
                assert aortic <= previous + 1e-9, f"Aortic pressure rose from {previous} to {aortic} while closed"
            previous = aortic
        assert open_ticks > 0 and closed_ticks > 0

    def test_never_below_diastolic_floor(self, heart, patient_with):
        p = patient_with(heart)
        for _ in range(400):
            heart.update(p, 0.01, p.rng)
            assert heart.aortic_pressure >= p.blood.blood_pressure.diastolic - 1e-9


class TestEjectionAndRate:
    def test_ejection_fraction_latched(self, heart, patient_with):
        p = patient_with(heart)
        for _ in range(400):
            heart.update(p, 0.01, p.rng)
        assert heart.end_diastolic_volume > heart.end_systolic_volume
        assert 0.0 < heart.ejection_fraction < 1.0

    def test_measured_rate_from_r_peaks(self, heart, patient_with):
        p = patient_with(heart)
        heart.set_rate(90.0)
        for _ in range(1000):
            heart.update(p, 0.01, p.rng)
        assert heart.measured_heart_rate == pytest.approx(90.0, abs=3.0)

    @pytest.mark.parametrize("bad", [0.0, -10.0, float("nan"), float("inf")])
    def test_set_rate_rejects_invalid(self, heart, bad):
        with pytest.raises(ValueError):
            heart.set_rate(bad)

    def test_set_rate_clamps(self, heart):
        heart.set_rate(400.0)
        assert heart.heart_rate == heart.config.hr_max


class TestBloodPressure:
    def test_baseline(self, heart, patient_with):
        p = patient_with(heart)
        heart.update(p, 0.0, p.rng)
        assert p.blood.blood_pressure.systolic == pytest.approx(120.0)
        assert p.blood.blood_pressure.diastolic == pytest.approx(80.0)

    def test_angiotensin_raises_pressure(self, heart, patient_with):
        p = patient_with(heart)
        p.blood.angiotensin = 5.0
        heart.update(p, 0.0, p.rng)
        # multiplier 1 + 0.05 * 4 = 1.2
        assert p.blood.blood_pressure.systolic == pytest.approx(144.0)
        assert p.blood.blood_pressure.diastolic == pytest.approx(96.0)

    def test_vasoconstriction_capped(self, heart, patient_with):
        p = patient_with(heart)
        p.blood.angiotensin = 50.0
        heart.update(p, 0.0, p.rng)
        assert p.blood.blood_pressure.systolic <= heart.config.sbp_max
        assert p.blood.blood_pressure.diastolic <= heart.config.dbp_max


class TestEKG:
    def test_lead_names_and_count(self):
        heart = Heart(1, lead_count=3)
        assert list(heart.ekg_leads) == ["I", "II", "III"]

    @pytest.mark.parametrize("count", [0, 13])
    def test_invalid_lead_count(self, count):
        with pytest.raises(ValueError):
            Heart(1, lead_count=count)

    def test_lead_attenuation(self):
        heart = Heart(1)
        volts = heart.ekg.sample(0.22)
        assert volts[0] == pytest.approx(heart.ekg.base_voltage(0.22))
        assert volts[5] == pytest.approx(0.5 * volts[0])

    def test_r_wave_dominates(self):
        heart = Heart(1)
        fractions = np.linspace(0.0, 0.999, 1000)
        volts = [heart.ekg.base_voltage(f) for f in fractions]
        assert fractions[int(np.argmax(volts))] == pytest.approx(0.22, abs=0.01)
        assert heart.ekg.base_voltage(0.22) > 0.7
        assert heart.ekg.base_voltage(0.40) == pytest.approx(0.3, abs=0.05)

    def test_buffers_bounded(self, patient_with):
        heart = Heart(1, waveform_capacity=50)
        p = patient_with(heart)
        for _ in range(120):
            heart.update(p, 0.01, p.rng)
        assert all(len(buf) == 50 for buf in heart.ekg_leads.values())
