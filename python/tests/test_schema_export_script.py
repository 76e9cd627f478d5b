import json
import pathlib
import subprocess
import sys
import tempfile
import unittest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "export_design_schemas.py"

sys.path.append(str(PROJECT_ROOT))
sys.path.append(str(SCRIPT_PATH.parent))

from enclosure_core import ADVICE_RULES, DRIVER_CATALOG  # noqa: E402
from export_design_schemas import export_design_bundle  # noqa: E402


class DesignBundleExportTests(unittest.TestCase):
    def test_bundle_contains_schemas_reference_and_manifest(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = pathlib.Path(tmpdir) / "nested"
            written = export_design_bundle(output_dir)

            names = [path.name for path in written]
            self.assertEqual(names[-1], "manifest.json")
            self.assertIn("design-params.schema.json", names)
            self.assertIn("simulation-result.schema.json", names)
            self.assertIn("evaluation.schema.json", names)
            self.assertIn("reference.json", names)

            manifest = json.loads((output_dir / "manifest.json").read_text())
            self.assertEqual(manifest["files"], names[:-1])

            reference = json.loads((output_dir / "reference.json").read_text())
            self.assertEqual(len(reference["drivers"]), len(DRIVER_CATALOG))
            self.assertEqual([rule["code"] for rule in reference["rules"]], [rule.code for rule in ADVICE_RULES])
            self.assertEqual(reference["presets"]["tower"]["tuning_hz"], 42.0)

    def test_schemas_only_skips_reference(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            written = export_design_bundle(pathlib.Path(tmpdir), include_reference=False)
            self.assertNotIn("reference.json", [path.name for path in written])
            self.assertEqual(len(written), 4)

    def test_cli_writes_pretty_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            completed = subprocess.run(
                [sys.executable, str(SCRIPT_PATH), "--output", tmpdir, "--pretty"],
                check=True,
                capture_output=True,
                text=True,
            )
            self.assertIn("Exported 5 files", completed.stdout)

            schema_text = (pathlib.Path(tmpdir) / "design-params.schema.json").read_text()
            self.assertTrue(schema_text.startswith("{\n  "))
            self.assertEqual(json.loads(schema_text)["title"], "DesignParams")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
