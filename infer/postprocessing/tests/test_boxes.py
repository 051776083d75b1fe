"""Unit tests for boxes.py."""

import unittest

import numpy as np

from infer.exceptions import ShapeError
from infer.postprocessing.boxes import (
    box_area,
    box_iou,
    center_to_corner_boxes,
    non_max_suppression,
)


class TestCenterToCornerBoxes(unittest.TestCase):
    """Unit tests for center_to_corner_boxes()."""

    def test_two_dimensions(self) -> None:
        out = center_to_corner_boxes([[5, 5, 4, 2], [0, 0, 1, 1]])
        np.testing.assert_almost_equal(out, [[3, 4, 7, 6], [-0.5, -0.5, 0.5, 0.5]])

    def test_flat(self) -> None:
        out = center_to_corner_boxes([5, 5, 4, 2, 0, 0, 1, 1])
        self.assertEqual(out.shape, (8,))
        np.testing.assert_almost_equal(out, [3, 4, 7, 6, -0.5, -0.5, 0.5, 0.5])

    def test_empty(self) -> None:
        self.assertEqual(center_to_corner_boxes(np.zeros((0, 4))).shape, (0, 4))

    def test_invalid_shape(self) -> None:
        with self.assertRaises(ShapeError):
            center_to_corner_boxes([1, 2, 3])
        with self.assertRaises(ShapeError):
            center_to_corner_boxes([[1, 2, 3]])


class TestBoxIou(unittest.TestCase):
    """Unit tests for box_area() and box_iou()."""

    def test_area(self) -> None:
        np.testing.assert_almost_equal(box_area([[0, 0, 2, 3], [1, 1, 0, 0]]), [6, 0])

    def test_iou(self) -> None:
        iou = box_iou([0, 0, 10, 10], [[0, 0, 10, 10], [5, 0, 15, 10], [20, 20, 30, 30]])
        np.testing.assert_almost_equal(iou, [1, 50 / 150, 0])

    def test_zero_area(self) -> None:
        iou = box_iou([1, 1, 1, 1], [[1, 1, 1, 1], [0, 0, 2, 2]])
        np.testing.assert_equal(iou, [0, 0])

    def test_symmetric(self) -> None:
        rng = np.random.default_rng(0)
        corners = rng.uniform(0, 10, size=(20, 2))
        boxes = np.concatenate([corners, corners + rng.uniform(0, 5, size=(20, 2))], axis=-1)
        for i in range(len(boxes)):
            for j in range(len(boxes)):
                a = box_iou(boxes[i], boxes[j : j + 1])[0]
                b = box_iou(boxes[j], boxes[i : i + 1])[0]
                self.assertAlmostEqual(a, b)
                self.assertGreaterEqual(a, 0)
                self.assertLessEqual(a, 1 + 1e-12)

    def test_more_than_one_reference_box(self) -> None:
        with self.assertRaises(ShapeError):
            box_iou([[0, 0, 1, 1], [0, 0, 1, 1]], [0, 0, 1, 1])


class TestNonMaxSuppression(unittest.TestCase):
    """Unit tests for non_max_suppression()."""

    def test_overlapping_boxes(self) -> None:
        boxes = [[0, 0, 10, 10], [1, 1, 11, 11]]
        self.assertListEqual(non_max_suppression(boxes, [0.9, 0.8], 0.3), [0])

    def test_threshold_is_strict(self) -> None:
        boxes = [[0, 0, 10, 10], [5, 0, 15, 10]]  # IoU = 1/3
        self.assertListEqual(non_max_suppression(boxes, [0.9, 0.8], 1 / 3 + 1e-9), [0, 1])
        self.assertListEqual(non_max_suppression(boxes, [0.9, 0.8], 0.3), [0])

    def test_orders_by_score(self) -> None:
        boxes = [[0, 0, 1, 1], [5, 5, 6, 6], [10, 10, 11, 11], [0, 0, 1, 1]]
        self.assertListEqual(non_max_suppression(boxes, [0.2, 0.9, 0.5, 0.7], 0.5), [1, 3, 2])

    def test_ties_go_to_earliest_index(self) -> None:
        boxes = [[0, 0, 1, 1], [0, 0, 1, 1]]
        self.assertListEqual(non_max_suppression(boxes, [0.5, 0.5], 0.5), [0])

    def test_flat_input(self) -> None:
        self.assertListEqual(non_max_suppression([0, 0, 10, 10, 1, 1, 11, 11], [0.8, 0.9], 0.3), [1])

    def test_zero_area_boxes_are_kept(self) -> None:
        boxes = [[1, 1, 1, 1], [1, 1, 1, 1]]
        self.assertListEqual(non_max_suppression(boxes, [0.9, 0.8], 0.0), [0, 1])

    def test_empty(self) -> None:
        self.assertListEqual(non_max_suppression(np.zeros((0, 4)), [], 0.5), [])

    def test_score_count_mismatch(self) -> None:
        with self.assertRaises(ShapeError):
            non_max_suppression([[0, 0, 1, 1]], [0.1, 0.2], 0.5)

    def test_kept_boxes_do_not_overlap(self) -> None:
        rng = np.random.default_rng(0)
        corners = rng.uniform(0, 20, size=(50, 2))
        boxes = np.concatenate([corners, corners + rng.uniform(1, 6, size=(50, 2))], axis=-1)
        scores = rng.uniform(size=(50,))
        threshold = 0.4

        keep = non_max_suppression(boxes, scores, threshold)

        self.assertEqual(len(set(keep)), len(keep))
        self.assertTrue(np.all(np.diff(scores[keep]) <= 0))
        for i, a in enumerate(keep):
            for b in keep[i + 1 :]:
                self.assertLessEqual(box_iou(boxes[a], boxes[b])[0], threshold)
        # every suppressed box overlaps some higher-scoring kept box
        for idx in set(range(50)) - set(keep):
            ious = box_iou(boxes[idx], boxes[keep])
            self.assertTrue(np.any((ious > threshold) & (scores[keep] >= scores[idx])))
