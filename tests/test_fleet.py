import unittest
from unittest import mock

from vrufleet.config.env import RepositoryConfig
from vrufleet.historical.catalog import CuratedCatalog
from vrufleet.repository import fleet
from vrufleet.repository.fleet import BASELINE_FLEET, FleetAggregator, compute_rows
from vrufleet.repository.store import AssetRepository


def _flat_catalog():
    # two assets with identical liters: one SAR, one USD
    january = [10] * 31
    return CuratedCatalog.from_dict({
        "curated": {
            "VRU-X1": {"years": {"2025": {"01": january}}},
            "GECO-X1": {"years": {"2025": {"01": january}}},
        }
    })


class TestFleetAggregator(unittest.TestCase):
    def setUp(self):
        self.repo = AssetRepository(RepositoryConfig(seed="test"))
        self.agg = FleetAggregator(self.repo)

    def test_primes_baseline_fleet(self):
        rows = self.agg.aggregate("2025")
        self.assertEqual(sorted(self.repo.ids()), sorted(BASELINE_FLEET))
        self.assertEqual(len(rows), 365)
        self.assertEqual(rows[0].date, "2025-01-01")
        self.assertEqual([r.date for r in rows], sorted(r.date for r in rows))
        for r in rows:
            self.assertAlmostEqual(r.profit, r.revenue - r.expenses)

    def test_window_all_and_invalid(self):
        rows = self.agg.aggregate("all")
        self.assertEqual(rows[0].date, "2024-07-01")
        with self.assertRaises(ValueError):
            self.agg.aggregate("last-year")

    def test_duplicate_ids_counted_once(self):
        once = self.agg.aggregate("2025", ["VRU-A03"])
        twice = self.agg.aggregate("2025", ["VRU-A03", "VRU-A03"])
        self.assertEqual(once, twice)

    def test_single_id_string_is_one_asset(self):
        as_list = self.agg.aggregate("2025", ["VRU-A03"])
        gen = self.repo.generation
        as_str = self.agg.aggregate("2025", "VRU-A03")
        self.assertEqual(as_str, as_list)
        self.assertEqual(self.repo.generation, gen)
        self.assertNotIn("V", self.repo)
        self.assertEqual(self.repo.ids(), ["VRU-A03"])

    def test_subset_matches_single_asset(self):
        rec = self.repo.get("VRU-WAS")
        rows = self.agg.aggregate("2025", ["VRU-WAS"])
        liters = sum(d.recovered_liters for d in rec.daily if d.date.startswith("2025"))
        self.assertAlmostEqual(sum(r.recovered_liters for r in rows), liters)

    def test_empty_subset(self):
        self.assertEqual(self.agg.aggregate("2025", []), [])

    def test_unscoped_query_is_cached(self):
        with mock.patch.object(fleet, "compute_rows", wraps=compute_rows) as spy:
            first = self.agg.aggregate("2025")
            second = self.agg.aggregate("2025")
        self.assertEqual(spy.call_count, 1)
        self.assertEqual(first, second)
        self.assertFalse(self.agg.is_dirty)

    def test_subset_query_does_not_touch_cache(self):
        full = self.agg.aggregate("2025")
        with mock.patch.object(fleet, "compute_rows", wraps=compute_rows) as spy:
            subset = self.agg.aggregate("2025", ["VRU-A03"])
            again = self.agg.aggregate("2025")
        self.assertEqual(spy.call_count, 1)
        self.assertNotEqual(subset, full)
        self.assertEqual(again, full)

    def test_returned_rows_are_a_copy(self):
        rows = self.agg.aggregate("2025")
        rows.clear()
        self.assertEqual(len(self.agg.aggregate("2025")), 365)

    def test_update_invalidates_every_cached_window(self):
        self.agg.aggregate("2025")
        before_2026 = self.agg.aggregate("2026")
        self.repo.update("VRU-A03", {"price_per_liter": 10.0})
        self.assertTrue(self.agg.is_dirty)

        after_2026 = self.agg.aggregate("2026")
        self.assertGreater(sum(r.revenue for r in after_2026), sum(r.revenue for r in before_2026))
        expected = compute_rows(self.repo.records(), "2025")
        self.assertEqual(self.agg.aggregate("2025"), expected)

    def test_new_asset_in_subset_invalidates_cache(self):
        self.agg.aggregate("2025")
        self.agg.aggregate("2025", ["SEOIL-01"])
        rows = self.agg.aggregate("2025")
        self.assertIn("SEOIL-01", self.repo)
        self.assertEqual(rows, compute_rows(self.repo.records(), "2025"))

    def test_invalidate(self):
        self.agg.aggregate("2025")
        self.agg.invalidate()
        self.assertTrue(self.agg.is_dirty)


class TestCurrencyNormalization(unittest.TestCase):
    def setUp(self):
        self.repo = AssetRepository(RepositoryConfig(seed="test"), catalog=_flat_catalog())
        self.agg = FleetAggregator(self.repo, baseline=())
        for asset_id in ("VRU-X1", "GECO-X1"):
            self.repo.update(asset_id, {"price_per_liter": 2.0})

    def test_usd_revenue_scaled_to_base(self):
        sar = self.agg.aggregate("2025", ["VRU-X1"])
        usd = self.agg.aggregate("2025", ["GECO-X1"])
        self.assertEqual(len(sar), 31)
        for a, b in zip(sar, usd):
            self.assertAlmostEqual(a.revenue, 20.0)
            self.assertAlmostEqual(b.revenue, 20.0 * 3.75)

    def test_mixed_fleet_sums_normalized_values(self):
        rows = self.agg.aggregate("2025", ["VRU-X1", "GECO-X1"])
        sar_exp = (20.0 - 20.0 / 1.15) + 10 * 0.0952 * 0.32
        usd_exp = ((20.0 - 20.0 / 1.10) + 10 * 0.0952 * 0.12) * 3.75
        for r in rows:
            self.assertAlmostEqual(r.recovered_liters, 20)
            self.assertAlmostEqual(r.revenue, 20.0 + 75.0)
            self.assertAlmostEqual(r.expenses, sar_exp + usd_exp)
            self.assertAlmostEqual(r.profit, 95.0 - sar_exp - usd_exp)

    def test_unscoped_covers_registered_assets_only(self):
        # nothing to prime: repository already holds both assets
        rows = self.agg.aggregate("2025")
        self.assertAlmostEqual(rows[0].revenue, 95.0)

    def test_currency_change_moves_revenue(self):
        self.repo.update("VRU-X1", {"currency": "BHD"})
        rows = self.agg.aggregate("2025", ["VRU-X1"])
        self.assertAlmostEqual(rows[0].revenue, 20.0 * 9.95)


if __name__ == "__main__":
    unittest.main()
