from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from enclosure_core import DRIVER_CATALOG, DesignStore
from services.gateway.app.main import create_app


class GatewayDesignTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = DesignStore()
        self.client = TestClient(create_app(self.store))

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_catalog_endpoints(self) -> None:
        drivers = self.client.get("/drivers").json()["drivers"]
        self.assertEqual(len(drivers), len(DRIVER_CATALOG))
        presets = self.client.get("/presets").json()["presets"]
        self.assertEqual(presets["soundbar"]["box_type"], "sealed")
        rules = self.client.get("/rules").json()["rules"]
        self.assertEqual(rules[-1]["code"], "physical.port_length")

    def test_fetch_design(self) -> None:
        payload = self.client.get("/design").json()
        self.assertEqual(payload["params"]["width_cm"], 45.0)
        self.assertTrue(payload["result"]["is_valid"])
        self.assertEqual(payload["result"]["net_volume_l"], self.store.result.net_volume_l)

    def test_patch_design_updates_store(self) -> None:
        response = self.client.patch("/design", json={"box_type": "sealed"})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["params"]["box_type"], "sealed")
        self.assertEqual([a["code"] for a in payload["result"]["advice"]], ["car_audio.sealed_power"])
        self.assertEqual(self.store.current.box_type.value, "sealed")

    def test_patch_port_and_driver(self) -> None:
        response = self.client.patch("/design/port", json={"tuning_hz": 30.0})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["params"]["port"]["tuning_hz"], 30.0)
        response = self.client.patch("/design/driver", json={"xmax_mm": 20.0})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.store.current.driver.xmax_mm, 20.0)
        self.assertEqual(self.store.current.port.tuning_hz, 30.0)

    def test_invalid_patch_is_rejected(self) -> None:
        response = self.client.patch("/design", json={"box_type": "horn"})
        self.assertEqual(response.status_code, 422)
        response = self.client.patch("/design/port", json={"count": 0})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.store.current.box_type.value, "ported")

    def test_degenerate_design_is_reported(self) -> None:
        response = self.client.patch("/design", json={"width_cm": 3.0})
        self.assertEqual(response.status_code, 200)
        result = response.json()["result"]
        self.assertFalse(result["is_valid"])
        self.assertEqual(len(result["warnings"]), 1)

    def test_extreme_tuning_is_reported_not_raised(self) -> None:
        response = self.client.patch("/design/port", json={"tuning_hz": 1e200})
        self.assertEqual(response.status_code, 200)
        result = response.json()["result"]
        self.assertFalse(result["is_valid"])
        self.assertEqual(len(result["warnings"]), 1)

    def test_select_driver(self) -> None:
        name = DRIVER_CATALOG[3].name
        response = self.client.post("/design/driver/select", json={"name": name})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["params"]["driver"]["name"], name)
        response = self.client.post("/design/driver/select", json={"name": "Missing"})
        self.assertEqual(response.status_code, 404)

    def test_project_context(self) -> None:
        response = self.client.post("/design/context", json={"application": "studio", "speaker_type": "bookshelf"})
        self.assertEqual(response.status_code, 200)
        params = response.json()["params"]
        self.assertEqual(params["thickness_mm"], 25.0)
        self.assertEqual(params["bracing_type"], "cross")
        self.assertEqual(params["width_cm"], 20.0)

    def test_simulate_does_not_touch_store(self) -> None:
        response = self.client.post("/simulate", json={"depth_cm": 50.0, "port": {"tuning_hz": 32.0}})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["params"]["depth_cm"], 50.0)
        self.assertEqual(payload["params"]["port"]["tuning_hz"], 32.0)
        self.assertGreater(payload["result"]["gross_volume_l"], self.store.result.gross_volume_l)
        self.assertEqual(self.store.current.depth_cm, 40.0)

    def test_schema_endpoints(self) -> None:
        catalog = self.client.get("/schemas/design").json()["schemas"]
        self.assertIn("evaluation", catalog)
        response = self.client.get("/schemas/design/Design-Params")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["schema"]["title"], "DesignParams")
        self.assertEqual(self.client.get("/schemas/design/unknown").status_code, 404)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
