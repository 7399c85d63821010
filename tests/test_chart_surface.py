from __future__ import annotations

import unittest

import numpy as np
import torch

from pareto_plot import ParetoDataError
from pareto_plot.compile import compile_full_rewrite_batch, compile_replace_patches_batch
from pareto_plot.surface import ChartSurface, FullRewrite, ReplaceRect, WriteBatch


class ChartSurfaceTests(unittest.TestCase):
    def test_init_fills_background(self) -> None:
        surface = ChartSurface(height=2, width=3)
        snap = surface.read_snapshot()
        self.assertEqual(tuple(snap.shape), (2, 3, 4))
        self.assertEqual(snap.dtype, torch.uint8)
        self.assertTrue(torch.all(snap == 255))
        self.assertEqual(surface.revision, 0)

    def test_full_rewrite_bumps_revision(self) -> None:
        surface = ChartSurface(height=1, width=2)
        payload = torch.tensor([[[1, 2, 3, 4], [5, 6, 7, 8]]], dtype=torch.uint8)
        self.assertEqual(surface.submit_write_batch(WriteBatch([FullRewrite(payload)])), 1)
        self.assertTrue(torch.equal(surface.read_snapshot(), payload))

    def test_replace_rect_and_bounds(self) -> None:
        surface = ChartSurface(height=2, width=2)
        patch = torch.zeros((1, 1, 4), dtype=torch.uint8)
        surface.submit_write_batch(WriteBatch([ReplaceRect(x=1, y=1, width=1, height=1, rect_h_w_4=patch)]))
        snap = surface.read_snapshot()
        self.assertEqual(snap[1, 1].tolist(), [0, 0, 0, 0])
        self.assertEqual(snap[0, 0].tolist(), [255, 255, 255, 255])
        with self.assertRaisesRegex(ParetoDataError, "bounds"):
            surface.submit_write_batch(WriteBatch([ReplaceRect(x=2, y=0, width=1, height=1, rect_h_w_4=patch)]))

    def test_failed_batch_leaves_surface_untouched(self) -> None:
        surface = ChartSurface(height=2, width=2)
        patch = torch.zeros((1, 1, 4), dtype=torch.uint8)
        batch = WriteBatch(
            [
                ReplaceRect(x=0, y=0, width=1, height=1, rect_h_w_4=patch),
                ReplaceRect(x=0, y=0, width=3, height=1, rect_h_w_4=torch.zeros((1, 3, 4), dtype=torch.uint8)),
            ]
        )
        with self.assertRaises(ParetoDataError):
            surface.submit_write_batch(batch)
        self.assertTrue(torch.all(surface.read_snapshot() == 255))
        self.assertEqual(surface.revision, 0)

    def test_invalid_batches_are_rejected(self) -> None:
        surface = ChartSurface(height=1, width=1)
        with self.assertRaises(ParetoDataError):
            surface.submit_write_batch(WriteBatch([]))
        with self.assertRaisesRegex(ParetoDataError, "invalid shape"):
            surface.submit_write_batch(WriteBatch([FullRewrite(torch.zeros((2, 2, 4), dtype=torch.uint8))]))
        with self.assertRaises(ValueError):
            ChartSurface(height=0, width=1)

    def test_out_of_range_pixels_are_sanitized(self) -> None:
        surface = ChartSurface(height=1, width=2)
        payload = torch.tensor([[[300.0, 0.0, 0.0, 255.0], [1.0, 2.0, 3.0, 255.0]]])
        with self.assertLogs("pareto_plot.surface", level="WARNING"):
            surface.submit_write_batch(WriteBatch([FullRewrite(payload)]))
        snap = surface.read_snapshot()
        self.assertEqual(snap[0, 0].tolist(), [255, 0, 255, 255])
        self.assertEqual(snap[0, 1].tolist(), [1, 2, 3, 255])

    def test_resize_reallocates(self) -> None:
        surface = ChartSurface(height=1, width=1)
        surface.resize(3, 4)
        self.assertEqual(surface.shape, (3, 4))
        self.assertEqual(tuple(surface.read_snapshot().shape), (3, 4, 4))


class CompileTests(unittest.TestCase):
    def test_full_rewrite_from_numpy(self) -> None:
        frame = np.zeros((2, 3, 4), dtype=np.uint8)
        batch = compile_full_rewrite_batch(frame)
        self.assertEqual(len(batch.operations), 1)
        self.assertIsInstance(batch.operations[0], FullRewrite)
        self.assertEqual(tuple(batch.operations[0].tensor_h_w_4.shape), (2, 3, 4))

    def test_full_rewrite_rejects_bad_frames(self) -> None:
        with self.assertRaisesRegex(ParetoDataError, "uint8"):
            compile_full_rewrite_batch(np.zeros((2, 2, 4), dtype=np.float32))
        with self.assertRaisesRegex(ParetoDataError, "shape"):
            compile_full_rewrite_batch(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_patches_skip_empty_entries(self) -> None:
        batch = compile_replace_patches_batch(
            [
                (1, 2, np.full((2, 2, 4), 7, dtype=np.uint8)),
                (0, 0, np.zeros((0, 2, 4), dtype=np.uint8)),
            ]
        )
        self.assertEqual(len(batch.operations), 1)
        op = batch.operations[0]
        self.assertEqual((op.x, op.y, op.width, op.height), (1, 2, 2, 2))
        with self.assertRaises(ParetoDataError):
            compile_replace_patches_batch([])


if __name__ == "__main__":
    unittest.main()
