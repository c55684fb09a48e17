import unittest

from vrufleet.api import service
from vrufleet.api.server import app
from vrufleet.config.env import RepositoryConfig
from vrufleet.repository.fleet import FleetAggregator
from vrufleet.repository.store import AssetRepository


class TestAPI(unittest.TestCase):
    def setUp(self):
        app.testing = True
        self.client = app.test_client()
        self._orig = (service.REPOSITORY, service.AGGREGATOR)
        service.REPOSITORY = AssetRepository(RepositoryConfig(seed="api"))
        service.AGGREGATOR = FleetAggregator(service.REPOSITORY)

    def tearDown(self):
        service.REPOSITORY, service.AGGREGATOR = self._orig

    def test_healthz(self):
        rv = self.client.get("/healthz")
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(rv.get_json()["status"], "ok")

    def test_get_asset(self):
        rv = self.client.get("/assets/VRU-A03")
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(body["strategy"], "curated")
        self.assertEqual(body["config"]["currency"], "SAR")
        self.assertEqual(len(body["hourly"]), 49)
        self.assertTrue(body["daily"])
        self.assertTrue(body["monthly"])

    def test_get_asset_include_filter(self):
        body = self.client.get("/assets/VRU-A03?include=monthly").get_json()
        self.assertIn("monthly", body)
        self.assertNotIn("daily", body)
        self.assertNotIn("hourly", body)

    def test_unknown_asset_is_placeholder(self):
        body = self.client.get("/assets/NOT-A-UNIT").get_json()
        self.assertEqual(body["strategy"], "placeholder")
        self.assertEqual(len(body["daily"]), 1)

    def test_patch_config(self):
        rv = self.client.patch("/assets/VRU-A03/config", json={"salesPricePerLiter": 3.0})
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(body["config"]["price_per_liter"], 3.0)
        for m in body["monthly"]:
            self.assertAlmostEqual(m["sales_amount"], m["recovered_liters"] * 3.0, places=6)

    def test_patch_config_errors(self):
        rv = self.client.patch("/assets/VRU-A03/config", json={})
        self.assertEqual(rv.status_code, 400)
        rv = self.client.patch("/assets/VRU-A03/config", json={"vatRate": 2})
        self.assertEqual(rv.status_code, 400)
        self.assertIn("vat_rate", rv.get_json()["error"])
        rv = self.client.patch("/assets/VRU-A03/config", json={"currency": "EUR"})
        self.assertEqual(rv.status_code, 400)

    def test_asset_csv(self):
        rv = self.client.get("/assets/SEOIL-01/daily.csv")
        self.assertEqual(rv.status_code, 200)
        self.assertTrue(rv.mimetype.startswith("text/csv"))
        self.assertTrue(rv.get_data(as_text=True).startswith("date,recovered_liters"))
        self.assertEqual(self.client.get("/assets/SEOIL-01/weekly.csv").status_code, 404)

    def test_fleet_aggregate(self):
        rv = self.client.get("/fleet/aggregate?window=2025")
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(body["window"], "2025")
        self.assertEqual(len(body["rows"]), 365)

    def test_fleet_aggregate_dedups_ids(self):
        one = self.client.get("/fleet/aggregate?window=2025&ids=VRU-A03").get_json()
        two = self.client.get("/fleet/aggregate?window=2025&ids=VRU-A03,VRU-A03").get_json()
        self.assertEqual(one["rows"], two["rows"])

    def test_fleet_aggregate_bad_window(self):
        rv = self.client.get("/fleet/aggregate?window=yesterday")
        self.assertEqual(rv.status_code, 400)
        self.assertIn("error", rv.get_json())

    def test_fleet_aggregate_csv(self):
        rv = self.client.get("/fleet/aggregate.csv?window=2026&ids=VRU-A03")
        self.assertEqual(rv.status_code, 200)
        lines = rv.get_data(as_text=True).splitlines()
        self.assertEqual(lines[0], "date,recovered_liters,revenue,expenses,profit")
        self.assertTrue(lines[1].startswith("2026-01-01"))

    def test_fleet_summary(self):
        body = self.client.get("/fleet/summary?window=2025&ids=VRU-A03,SEOIL-01").get_json()
        self.assertEqual(body["currency"], "SAR")
        self.assertEqual(set(body["checks"]), {"VRU-A03", "SEOIL-01"})
        self.assertTrue(all(body["checks"].values()))
        self.assertGreater(body["totals"]["revenue"], 0)
        self.assertIn("# Fleet Summary (2025)", body["report"])
        self.assertIn("co2_avoided_kg", body["environmental"])

    def test_fleet_projection(self):
        body = self.client.get("/fleet/projection?window=2025&ids=VRU-A03").get_json()
        self.assertEqual(len(body["months"]), 6)
        self.assertEqual(body["months"][0]["month"], "2026-01")
        rv = self.client.get("/fleet/projection.csv?window=2025&ids=VRU-A03")
        self.assertTrue(rv.get_data(as_text=True).startswith("month,forecast"))


if __name__ == "__main__":
    unittest.main()
