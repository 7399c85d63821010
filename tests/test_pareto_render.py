from __future__ import annotations

import unittest

import numpy as np

from pareto_plot.adapters import query_from_sequences
from pareto_plot.config import ChartConfig, validate_format_settings
from pareto_plot.data_points import build_data_points
from pareto_plot.palette import ColorPalette, high_contrast_palette
from pareto_plot.raster import draw_text, new_canvas, text_size
from pareto_plot.render import (
    BarElement,
    ElementArena,
    RenderState,
    bar_patch,
    clear_render_state,
    rasterize,
    render_sync,
    sync_selection_state,
)
from pareto_plot.scales import Viewport, build_scales
from pareto_plot.selection import SelectionId, SelectionService
from pareto_plot.series import accumulate_cumulative_percent, build_pareto_line, compute_total


def _render(state, categories, values, *, palette=None, settings=None, viewport=Viewport(200, 100), format_mode=False):
    palette = palette or ColorPalette()
    query = query_from_sequences(categories, values)
    points = build_data_points(query, palette, SelectionService())
    total = compute_total(points)
    points = accumulate_cumulative_percent(points, total)
    scales = build_scales([p.index for p in points], total, viewport)
    line = build_pareto_line(points, scales)
    kwargs = {"settings": settings} if settings is not None else {}
    return render_sync(state, points, scales, line, palette=palette, format_mode=format_mode, **kwargs)


def _bar(key: int, index: int | None = None) -> BarElement:
    return BarElement(key=key, element_id=key + 1, selection_key=SelectionId(column="Table.c", index=key if index is None else index))


class ElementArenaTests(unittest.TestCase):
    def test_plan_diffs_keys(self) -> None:
        arena: ElementArena[BarElement] = ElementArena()
        arena.apply(arena.plan([0, 1, 2]), lambda key, eid: BarElement(key=key, element_id=eid))
        plan = arena.plan([1, 2, 3])
        self.assertEqual(plan.create, (3,))
        self.assertEqual(plan.update, (1, 2))
        self.assertEqual(plan.delete, (0,))
        self.assertFalse(plan.is_noop())

    def test_element_ids_are_never_reused(self) -> None:
        arena: ElementArena[BarElement] = ElementArena()
        factory = lambda key, eid: BarElement(key=key, element_id=eid)
        arena.apply(arena.plan([0, 1]), factory)
        arena.apply(arena.plan([1]), factory)
        arena.apply(arena.plan([0, 1]), factory)
        self.assertEqual(arena.get(0).element_id, 3)
        self.assertEqual(arena.get(1).element_id, 2)
        self.assertIn(1, arena)
        self.assertNotIn(2, arena)
        self.assertEqual(arena.keys(), (0, 1))


class RenderSyncTests(unittest.TestCase):
    def test_render_twice_is_idempotent(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        before = [(bar.element_id, bar.attributes()) for bar in state.bars]
        markers = list(state.markers)
        axes = dict(state.axes)
        plan = _render(state, ["A", "B", "C"], [60, 30, 10])
        self.assertTrue(plan.is_noop())
        self.assertEqual([(bar.element_id, bar.attributes()) for bar in state.bars], before)
        self.assertEqual(state.markers, markers)
        self.assertEqual(state.axes, axes)

    def test_removing_middle_point_deletes_exactly_one_bar(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        first = state.bars.get(0)
        second = state.bars.get(1)
        plan = _render(state, ["A", "C"], [60, 10])
        self.assertEqual(plan.delete, (2,))
        self.assertEqual(plan.create, ())
        self.assertIs(state.bars.get(0), first)
        self.assertIs(state.bars.get(1), second)
        self.assertEqual(second.display_name, "C")
        self.assertEqual(len(state.bars), 2)

    def test_bar_geometry(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        bar = state.bars.get(0)
        self.assertEqual((bar.x, bar.width), (13.0, 50.0))
        self.assertEqual(bar.y, 50.0)
        self.assertEqual(bar.height, 45.0)
        self.assertEqual(bar.fill_opacity, 1.0)
        self.assertFalse(bar.sub_selectable)

    def test_hover_flag_survives_update(self) -> None:
        state = RenderState()
        _render(state, ["A", "B"], [1, 2])
        state.bars.get(1).hovered = True
        _render(state, ["A", "B"], [3, 4])
        self.assertTrue(state.bars.get(1).hovered)

    def test_markers_are_recreated_per_point(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        self.assertEqual(len(state.markers), 3)
        self.assertAlmostEqual(state.markers[0].radius, 95.0 / 50.0)
        self.assertEqual((state.markers[0].fill, state.markers[0].stroke, state.markers[0].stroke_width), ("#FFFFFF", "#000000", 3.0))
        _render(state, ["A", "B"], [60, 30])
        self.assertEqual(len(state.markers), 2)
        self.assertEqual(len(state.line.vertices), 3)

    def test_axes_follow_settings_and_contrast(self) -> None:
        state = RenderState()
        settings = validate_format_settings({"axis_fill": "#336699"})
        _render(state, ["A", "B"], [1, 2], settings=settings)
        self.assertEqual(set(state.axes), {"x", "y_left", "y_right"})
        self.assertEqual({axis.color for axis in state.axes.values()}, {"#336699"})
        self.assertAlmostEqual(state.axes["x"].font_size, 95.0 * 0.04)
        self.assertEqual(state.axes["x"].translate, (0.0, 95.0))
        self.assertEqual(state.axes["y_right"].translate, (198.0, 0.0))
        self.assertEqual([t.label for t in state.axes["x"].ticks], ["A", "B"])
        self.assertEqual(state.axes["y_right"].ticks[-1].label, "100")

        palette = high_contrast_palette()
        _render(state, ["A", "B"], [1, 2], palette=palette, settings=settings)
        self.assertEqual({axis.color for axis in state.axes.values()}, {palette.foreground})

        _render(state, ["A", "B"], [1, 2], settings=validate_format_settings({"axis_show": False}))
        self.assertFalse(any(axis.visible for axis in state.axes.values()))

    def test_average_line(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        self.assertIsNone(state.average_line)
        _render(state, ["A", "B", "C"], [60, 30, 10], settings=validate_format_settings({"average_line_show": True}))
        line = state.average_line
        self.assertEqual(line.label, "Average: 33.33")
        self.assertEqual(line.y, 70.0)
        self.assertAlmostEqual(line.label_offset, -0.5 * 95.0 * 0.04)
        self.assertEqual(line.color, "#888888")

    def test_format_mode_marks_bars_sub_selectable(self) -> None:
        state = RenderState()
        _render(state, ["A"], [1], format_mode=True)
        self.assertTrue(state.bars.get(0).sub_selectable)
        self.assertTrue(state.format_mode)

    def test_clear_removes_everything(self) -> None:
        state = RenderState()
        _render(state, ["A", "B"], [1, 2])
        plan = clear_render_state(state)
        self.assertEqual(plan.delete, (0, 1))
        self.assertEqual(len(state.bars), 0)
        self.assertEqual(state.markers, [])
        self.assertEqual(state.axes, {})
        self.assertEqual(state.line.vertices, ())


class SelectionSyncTests(unittest.TestCase):
    def test_none_or_no_bars_is_noop(self) -> None:
        bars = [_bar(0)]
        bars[0].set_opacity(0.7)
        self.assertEqual(sync_selection_state(bars, None, solid_opacity=1.0, dimmed_opacity=0.4), [])
        self.assertEqual(bars[0].fill_opacity, 0.7)
        self.assertEqual(sync_selection_state([], [SelectionId("Table.c", 0)], solid_opacity=1.0, dimmed_opacity=0.4), [])

    def test_empty_selection_makes_every_bar_solid(self) -> None:
        bars = [_bar(i) for i in range(3)]
        for bar in bars:
            bar.set_opacity(0.4)
        changed = sync_selection_state(bars, [], solid_opacity=1.0, dimmed_opacity=0.4)
        self.assertEqual(changed, [0, 1, 2])
        self.assertEqual({bar.fill_opacity for bar in bars}, {1.0})

    def test_single_selection_dims_the_rest(self) -> None:
        bars = [_bar(i) for i in range(3)]
        changed = sync_selection_state(bars, [SelectionId("Table.c", 1)], solid_opacity=1.0, dimmed_opacity=0.4)
        self.assertEqual(changed, [0, 2])
        self.assertEqual([bar.fill_opacity for bar in bars], [0.4, 1.0, 0.4])
        self.assertEqual([bar.stroke_opacity for bar in bars], [0.4, 1.0, 0.4])

    def test_superset_identity_selects_every_bar_in_column(self) -> None:
        bars = [_bar(i) for i in range(3)] + [BarElement(key=3, element_id=9, selection_key=SelectionId("Table.other", 3))]
        sync_selection_state(bars, [SelectionId("Table.c")], solid_opacity=1.0, dimmed_opacity=0.4)
        self.assertEqual([bar.fill_opacity for bar in bars], [1.0, 1.0, 1.0, 0.4])

    def test_repeated_sync_changes_nothing(self) -> None:
        bars = [_bar(i) for i in range(2)]
        ids = [SelectionId("Table.c", 0)]
        sync_selection_state(bars, ids, solid_opacity=1.0, dimmed_opacity=0.4)
        self.assertEqual(sync_selection_state(bars, ids, solid_opacity=1.0, dimmed_opacity=0.4), [])


class RasterizeTests(unittest.TestCase):
    def test_frame_shape_and_bar_fill(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        frame = rasterize(state)
        self.assertEqual(frame.shape, (100, 200, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(tuple(int(v) for v in frame[55, 20]), (0x11, 0x8D, 0xFF, 255))
        self.assertIs(state.last_frame, frame)

    def test_dimmed_bar_blends_toward_background(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        sync_selection_state(state.bars, [state.bars.get(1).selection_key], solid_opacity=1.0, dimmed_opacity=0.4)
        frame = rasterize(state)
        red = int(frame[55, 20, 0])
        self.assertGreater(red, 0x11)
        self.assertLess(red, 255)

    def test_bar_patch_is_clipped_to_frame(self) -> None:
        state = RenderState()
        _render(state, ["A", "B", "C"], [60, 30, 10])
        frame = rasterize(state)
        (x, y, w, h), pixels = bar_patch(state, 0, frame)
        self.assertEqual((x, y, w, h), (13, 50, 50, 45))
        self.assertEqual(pixels.shape, (45, 50, 4))
        self.assertIsNone(bar_patch(state, 99, frame))

    def test_axis_layer_is_cached(self) -> None:
        state = RenderState()
        _render(state, ["A", "B"], [1, 2])
        rasterize(state)
        template = state.layer_cache.axis_template
        rasterize(state)
        self.assertIs(state.layer_cache.axis_template, template)

    def test_empty_state_renders_background(self) -> None:
        frame = rasterize(RenderState(), "#000000", viewport=Viewport(4, 3))
        self.assertEqual(frame.shape, (3, 4, 4))
        self.assertTrue(np.all(frame[:, :, :3] == 0))


class DrawTextTests(unittest.TestCase):
    def test_label_ink_lands_inside_its_box(self) -> None:
        canvas = new_canvas(60, 30)
        w, h = text_size("88", font_size_px=16)
        self.assertGreater(w, 0)
        draw_text(canvas, 5, 5, "88", (0, 0, 0, 255), font_size_px=16)
        inked = np.argwhere(canvas[:, :, 0] < 255)
        self.assertGreater(len(inked), 0)
        self.assertGreaterEqual(inked[:, 0].min(), 5)
        self.assertLess(inked[:, 0].max(), 5 + h)
        self.assertTrue(np.all(canvas[:, :, 3] == 255))

    def test_empty_or_offscreen_text_is_a_noop(self) -> None:
        canvas = new_canvas(10, 10)
        draw_text(canvas, 0, 0, "", (0, 0, 0, 255))
        draw_text(canvas, 50, 50, "x", (0, 0, 0, 255))
        self.assertTrue(np.all(canvas == 255))


if __name__ == "__main__":
    unittest.main()
