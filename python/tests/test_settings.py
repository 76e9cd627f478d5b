import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from enclosure_core import DEFAULT_SETTINGS, SimulationSettings, settings_from_env


class SimulationSettingsTest(unittest.TestCase):
    def test_default_sweep(self) -> None:
        freqs = DEFAULT_SETTINGS.frequencies()
        self.assertEqual(freqs[0], 10.0)
        self.assertEqual(freqs[-1], 150.0)
        self.assertEqual(len(freqs), 141)

    def test_drive_voltage(self) -> None:
        self.assertAlmostEqual(DEFAULT_SETTINGS.drive_voltage(), (500.0 * 4.0) ** 0.5)

    def test_end_corrections_rank_flared_highest(self) -> None:
        aero = DEFAULT_SETTINGS.end_correction("aero")
        self.assertGreater(aero, DEFAULT_SETTINGS.end_correction("circular"))
        self.assertGreater(aero, DEFAULT_SETTINGS.end_correction("slot"))

    def test_env_overrides(self) -> None:
        settings = settings_from_env(
            {"ENCLOSURE_DRIVE_POWER_W": "250", "ENCLOSURE_SWEEP_STOP_HZ": "200", "UNRELATED": "x"}
        )
        self.assertEqual(settings.drive_power_w, 250.0)
        self.assertEqual(settings.sweep_stop_hz, 200.0)
        self.assertEqual(settings.sweep_start_hz, DEFAULT_SETTINGS.sweep_start_hz)

    def test_empty_env_returns_base(self) -> None:
        base = SimulationSettings(collision_margin_cm=3.0)
        self.assertIs(settings_from_env({}, base=base), base)
        self.assertIs(settings_from_env({"ENCLOSURE_DRIVE_POWER_W": "  "}, base=base), base)

    def test_invalid_env_value(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            settings_from_env({"ENCLOSURE_PORT_NOISE_LIMIT_MS": "loud"})
        self.assertIn("ENCLOSURE_PORT_NOISE_LIMIT_MS", str(ctx.exception))
        with self.assertRaises(ValueError):
            settings_from_env({"ENCLOSURE_DRIVE_POWER_W": "inf"})


if __name__ == "__main__":
    unittest.main()
