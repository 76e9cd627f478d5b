import json
import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from enclosure_core import (
    DEFAULT_DESIGN,
    BoxType,
    calculate,
    design_from_dict,
    design_json_schemas,
    design_params_schema,
    design_to_dict,
    evaluate,
    evaluation_schema,
    evaluation_to_dict,
    simulation_result_schema,
)


class DesignDictTests(unittest.TestCase):
    def test_partial_payload_is_layered_over_defaults(self) -> None:
        params = design_from_dict({"box_type": "sealed", "port": {"count": 2}})
        self.assertIs(params.box_type, BoxType.SEALED)
        self.assertEqual(params.port.count, 2)
        self.assertEqual(params.width_cm, DEFAULT_DESIGN.width_cm)

    def test_design_dict_is_json_ready(self) -> None:
        payload = design_to_dict(DEFAULT_DESIGN)
        self.assertEqual(json.loads(json.dumps(payload)), payload)
        self.assertEqual(design_from_dict(payload), DEFAULT_DESIGN)

    def test_evaluation_payload(self) -> None:
        result = evaluate(DEFAULT_DESIGN)
        payload = evaluation_to_dict(DEFAULT_DESIGN, result)
        self.assertEqual(set(payload), {"params", "result"})
        self.assertEqual(payload["result"]["net_volume_l"], result.net_volume_l)
        self.assertEqual(len(payload["result"]["frequency_response"]), 141)
        self.assertEqual(payload["result"]["frequency_response"][0]["x"], 10.0)
        self.assertIsInstance(payload["result"]["warnings"], list)
        json.dumps(payload)


class SchemaExportTests(unittest.TestCase):
    def test_design_params_schema(self) -> None:
        schema = design_params_schema()
        self.assertEqual(schema["title"], "DesignParams")
        self.assertEqual(schema["required"], [])
        props = schema["properties"]
        self.assertEqual(props["width_cm"]["exclusiveMinimum"], 0.0)
        self.assertEqual(props["chamber_ratio"]["maximum"], 1.0)
        self.assertEqual(props["box_type"]["enum"], ["sealed", "ported", "bandpass4"])
        self.assertEqual(props["is_solid"]["type"], "boolean")
        driver = props["driver"]
        self.assertEqual(driver["type"], "object")
        self.assertEqual(driver["properties"]["fs_hz"]["exclusiveMinimum"], 0.0)
        self.assertIn("name", driver["required"])
        port = props["port"]
        self.assertEqual(port["properties"]["count"]["minimum"], 1)
        self.assertIn("aero", port["properties"]["port_type"]["enum"])

    def test_simulation_result_schema(self) -> None:
        schema = simulation_result_schema()
        self.assertEqual(schema["title"], "SimulationResult")
        self.assertIn("net_volume_l", schema["required"])
        self.assertNotIn("advice", schema["required"])
        self.assertNotIn("is_valid", schema["required"])
        response = schema["properties"]["frequency_response"]
        self.assertEqual(response["type"], "array")
        self.assertEqual(response["items"]["properties"]["x"]["type"], "number")
        warnings = schema["properties"]["warnings"]
        self.assertEqual(warnings["items"]["type"], "string")
        advice = schema["properties"]["advice"]["items"]
        self.assertIn("error", advice["properties"]["level"]["enum"])

    def test_result_payload_matches_schema_fields(self) -> None:
        schema = simulation_result_schema()
        payload = calculate(DEFAULT_DESIGN).to_dict()
        self.assertEqual(set(payload), set(schema["properties"]))

    def test_catalog(self) -> None:
        catalog = design_json_schemas()
        self.assertEqual(set(catalog), {"design-params", "simulation-result", "evaluation"})
        self.assertEqual(evaluation_schema()["required"], ["params", "result"])
        self.assertEqual(catalog["evaluation"]["properties"]["result"]["title"], "SimulationResult")


if __name__ == "__main__":
    unittest.main()
