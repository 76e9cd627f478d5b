import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from enclosure_core import DEFAULT_DRIVER, DRIVER_CATALOG, DriverParams, driver_names, get_driver


class DriverCatalogTest(unittest.TestCase):
    def test_default_driver_matches_expected(self) -> None:
        self.assertIs(DEFAULT_DRIVER, DRIVER_CATALOG[0])
        self.assertAlmostEqual(DEFAULT_DRIVER.fs_hz, 34.0)
        self.assertAlmostEqual(DEFAULT_DRIVER.qts, 0.45)
        self.assertAlmostEqual(DEFAULT_DRIVER.vas_l, 56.0)
        self.assertAlmostEqual(DEFAULT_DRIVER.xmax_mm, 12.0)
        self.assertAlmostEqual(DEFAULT_DRIVER.sd_cm2, 510.0)

    def test_catalog_names_are_unique(self) -> None:
        names = driver_names()
        self.assertEqual(len(names), len(DRIVER_CATALOG))
        self.assertEqual(len(names), len(set(names)))

    def test_catalog_values_are_physical(self) -> None:
        for driver in DRIVER_CATALOG:
            with self.subTest(driver=driver.name):
                self.assertGreater(driver.fs_hz, 0.0)
                self.assertGreater(driver.qts, 0.0)
                self.assertGreater(driver.vas_l, 0.0)
                self.assertGreater(driver.sd_cm2, 0.0)

    def test_get_driver(self) -> None:
        driver = get_driver("B&C 18TBW100 (Pro Audio)")
        self.assertAlmostEqual(driver.sd_cm2, 1210.0)
        with self.assertRaises(KeyError):
            get_driver("Missing")

    def test_with_changes_returns_new_record(self) -> None:
        custom = DEFAULT_DRIVER.with_changes({"qts": "0.5", "name": "Custom"})
        self.assertIsInstance(custom, DriverParams)
        self.assertEqual(custom.qts, 0.5)
        self.assertEqual(custom.name, "Custom")
        self.assertEqual(DEFAULT_DRIVER.qts, 0.45)

    def test_with_changes_rejects_bad_input(self) -> None:
        with self.assertRaises(TypeError):
            DEFAULT_DRIVER.with_changes({"bl_t_m": 15.0})
        with self.assertRaises(ValueError):
            DEFAULT_DRIVER.with_changes({"fs_hz": "fast"})
        with self.assertRaises(ValueError):
            DEFAULT_DRIVER.with_changes({"xmax_mm": True})


if __name__ == "__main__":
    unittest.main()
