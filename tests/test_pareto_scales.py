from __future__ import annotations

import unittest

import numpy as np

from pareto_plot import ParetoDataError
from pareto_plot.adapters import query_from_sequences
from pareto_plot.data_points import build_data_points
from pareto_plot.palette import ColorPalette
from pareto_plot.scales import BandScale, LinearScale, Viewport, build_scales, format_ticks_for_axis, generate_nice_ticks
from pareto_plot.selection import SelectionService
from pareto_plot.series import accumulate_cumulative_percent, build_pareto_line, compute_total


class ScaleTests(unittest.TestCase):
    def test_band_scale_rounds_like_range_round(self) -> None:
        scale = BandScale(keys=(0, 1, 2), range_start=0, range_stop=100, padding=0.2)
        self.assertEqual(scale.step, 31.0)
        self.assertEqual(scale.bandwidth, 25.0)
        self.assertEqual([scale.position(k) for k in (0, 1, 2)], [7.0, 38.0, 69.0])
        self.assertEqual(scale.right_edge(0), 32.0)

    def test_band_scale_rejects_unknown_and_duplicate_keys(self) -> None:
        scale = BandScale(keys=("a",), range_start=0, range_stop=10)
        with self.assertRaises(KeyError):
            scale.position("b")
        with self.assertRaises(ParetoDataError):
            BandScale(keys=("a", "a"), range_start=0, range_stop=10)

    def test_empty_band_scale_has_zero_bandwidth(self) -> None:
        scale = BandScale(keys=(), range_start=0, range_stop=10)
        self.assertEqual(scale.bandwidth, 0.0)

    def test_value_and_percent_share_the_pixel_range(self) -> None:
        scales = build_scales([0, 1], 200.0, Viewport(100, 100))
        self.assertEqual(scales.baseline, 95.0)
        self.assertEqual(scales.value(0), 95.0)
        self.assertEqual(scales.value(200), 20.0)
        self.assertEqual(scales.percent(0), 95.0)
        self.assertEqual(scales.percent(100), 20.0)
        self.assertAlmostEqual(scales.value(100), scales.percent(50))
        self.assertLess(scales.value(150), scales.value(50))

    def test_zero_total_maps_to_baseline(self) -> None:
        scales = build_scales([0], 0.0, Viewport(100, 100))
        self.assertEqual(scales.value(0), 95.0)
        self.assertEqual(scales.value(5), 95.0)
        np.testing.assert_array_equal(scales.value.ticks(), np.asarray([0.0]))

    def test_overflowing_total_collapses_value_axis(self) -> None:
        scales = build_scales([0, 1], float("inf"), Viewport(100, 100))
        self.assertEqual(scales.value(1e308), 95.0)
        np.testing.assert_array_equal(scales.value.ticks(), np.asarray([0.0]))
        np.testing.assert_array_equal(generate_nice_ticks(0.0, float("inf"), 5), np.asarray([0.0]))

    def test_viewport_rejects_negative_size(self) -> None:
        with self.assertRaises(ParetoDataError):
            Viewport(-1, 10)

    def test_linear_map_vectorized(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), range=(100.0, 0.0))
        np.testing.assert_allclose(scale.map([0, 5, 10]), [100.0, 50.0, 0.0])

    def test_percent_ticks_are_nice(self) -> None:
        scales = build_scales([0], 1.0, Viewport(100, 100))
        ticks = scales.percent.ticks(10)
        np.testing.assert_allclose(ticks, np.arange(0.0, 101.0, 10.0))
        self.assertEqual(scales.percent.tick_labels(10)[:3], ["0", "10", "20"])

    def test_nice_ticks_and_labels(self) -> None:
        ticks = generate_nice_ticks(0.0, 1.0, 5)
        np.testing.assert_allclose(ticks, [0.0, 0.2, 0.4, 0.6, 0.8, 1.0])
        self.assertEqual(format_ticks_for_axis(ticks), ["0", "0.2", "0.4", "0.6", "0.8", "1"])


class ParetoLineTests(unittest.TestCase):
    def test_line_starts_at_first_band_and_tracks_right_edges(self) -> None:
        query = query_from_sequences(["A", "B", "C"], [10, 30, 60])
        points = build_data_points(query, ColorPalette(), SelectionService())
        total = compute_total(points)
        points = accumulate_cumulative_percent(points, total)
        scales = build_scales([p.index for p in points], total, Viewport(100, 100))
        line = build_pareto_line(points, scales)

        self.assertEqual(len(line.vertices), 4)
        self.assertEqual(line.vertices[0], (7.0, 95.0))
        self.assertEqual(line.keys, (0, 1, 2))
        self.assertEqual(len(line.markers), 3)
        self.assertEqual(line.markers[0][0], 32.0)
        self.assertAlmostEqual(line.markers[-1][1], 20.0)
        ys = [y for _, y in line.vertices]
        self.assertTrue(all(b <= a for a, b in zip(ys, ys[1:])))

    def test_empty_input_gives_empty_line(self) -> None:
        scales = build_scales([], 0.0, Viewport(10, 10))
        self.assertTrue(build_pareto_line((), scales).is_empty())


if __name__ == "__main__":
    unittest.main()
