"""Bounding box utilities for detection model outputs."""

import numpy as np

from infer.exceptions import ShapeError
from infer.utils.math import ArrayLike, as_scores, top_k


def _as_boxes(boxes: ArrayLike) -> np.ndarray:
    """Copy boxes into a fresh (n, 4) array, accepting flat buffers of length 4n."""
    out = as_scores(boxes)
    if out.ndim == 1:
        if out.size % 4 != 0:
            raise ShapeError(f"Flat box buffer length must be a multiple of 4, got {out.size}")
        return out.reshape(-1, 4)
    if out.ndim != 2 or out.shape[1] != 4:
        raise ShapeError(f"Expected boxes of shape (n, 4), got {out.shape}")
    return out


def center_to_corner_boxes(boxes: ArrayLike) -> np.ndarray:
    """Convert `[cx, cy, w, h]` boxes to `[x1, y1, x2, y2]`.

    Args:
        boxes: Boxes of shape (n, 4), or a flat buffer of length 4n

    Returns:
        Converted boxes with the same shape as the input
    """
    original_shape = np.shape(boxes)
    b = _as_boxes(boxes)
    half_w = b[:, 2] / 2
    half_h = b[:, 3] / 2
    out = np.stack(
        [
            b[:, 0] - half_w,
            b[:, 1] - half_h,
            b[:, 0] + half_w,
            b[:, 1] + half_h,
        ],
        axis=-1,
    )
    return out.reshape(original_shape)


def box_area(boxes: ArrayLike) -> np.ndarray:
    """Compute the area of `[x1, y1, x2, y2]` boxes; inverted boxes have area 0."""
    b = _as_boxes(boxes)
    return np.maximum(0, b[:, 2] - b[:, 0]) * np.maximum(0, b[:, 3] - b[:, 1])


def box_iou(box: ArrayLike, others: ArrayLike) -> np.ndarray:
    """Compute the intersection-over-union of one `[x1, y1, x2, y2]` box against many.

    Pairs whose union is empty (zero-area boxes) have an IoU of 0.

    Args:
        box: A single box of shape (4,)
        others: Boxes of shape (n, 4), or a flat buffer of length 4n

    Returns:
        IoU values of shape (n,)
    """
    a = _as_boxes(box)
    if a.shape[0] != 1:
        raise ShapeError(f"Expected a single box, got {a.shape[0]}")
    b = _as_boxes(others)
    a = a[0]

    inter_w = np.maximum(0, np.minimum(a[2], b[:, 2]) - np.maximum(a[0], b[:, 0]))
    inter_h = np.maximum(0, np.minimum(a[3], b[:, 3]) - np.maximum(a[1], b[:, 1]))
    intersection = inter_w * inter_h
    union = box_area(a)[0] + box_area(b) - intersection

    iou = np.zeros_like(intersection)
    np.divide(intersection, union, out=iou, where=union > 0)
    return iou


def non_max_suppression(boxes: ArrayLike, scores: ArrayLike, iou_threshold: float) -> list[int]:
    """Greedily select boxes by descending score, suppressing overlaps above `iou_threshold`.

    Args:
        boxes: `[x1, y1, x2, y2]` boxes of shape (n, 4), or a flat buffer of length 4n
        scores: One score per box, shape (n,)
        iou_threshold: Boxes overlapping a kept box by strictly more than this are suppressed

    Returns:
        Indices of the kept boxes, in descending order of score
    """
    b = _as_boxes(boxes)
    s = as_scores(scores)
    if s.ndim != 1 or len(s) != len(b):
        raise ShapeError(f"Got {len(b)} boxes but scores of shape {s.shape}")

    n = len(s)
    order = top_k(s, n)
    suppressed = np.zeros(n, dtype=bool)
    keep: list[int] = []

    for i, idx in enumerate(order):
        if suppressed[idx]:
            continue
        keep.append(idx)

        remaining = np.array(order[i + 1 :], dtype=np.int64)
        if len(remaining) == 0:
            break
        iou = box_iou(b[idx], b[remaining])
        suppressed[remaining[iou > iou_threshold]] = True

    return keep
