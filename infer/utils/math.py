"""Mathematical utilities for turning raw model scores into probabilities and rankings."""

from typing import Sequence, Union

import numpy as np

from infer.constants import DEFAULT_DTYPE


ArrayLike = Union[np.ndarray, Sequence[float]]


def as_scores(x: ArrayLike) -> np.ndarray:
    """Copy a score buffer into a fresh floating-point array."""
    return np.array(x, dtype=DEFAULT_DTYPE)


def log_sum_exp(x: ArrayLike) -> np.ndarray:
    """Compute the log of the sum of exponentials of `x` along the last dimension.

    Args:
        x: Real-valued array of dimension (*, N)

    Returns:
        y: Real-valued array of dimension (*, 1)
    """
    x = as_scores(x)
    dims = x.ndim
    # NOTE: for numerical stability, we shift the input by its maximum. This makes all exponents <=0.
    # For a vector x: LSE(x) = LSE(x - m) + m
    x_max = np.max(x, axis=dims - 1, keepdims=True)
    x_shifted = x - x_max
    exp_x_shifted = np.exp(x_shifted)
    sum_exp_x_shifted = np.sum(exp_x_shifted, axis=dims - 1, keepdims=True)
    lse_shifted = np.log(sum_exp_x_shifted)
    out = lse_shifted + x_max
    return out


def log_softmax(x: ArrayLike) -> np.ndarray:
    """Compute the log of the softmax of `x` along the last dimension.

    Args:
        x: Real-valued array of dimension (*, N)

    Returns:
        y: Real-valued array of dimension (*, N)
    """
    x = as_scores(x)
    if x.size == 0:
        return x
    return x - log_sum_exp(x)


def softmax(x: ArrayLike) -> np.ndarray:
    """Compute the softmax of `x` along the last dimension.

    Args:
        x: Real-valued array of dimension (*, N)

    Returns:
        y: Collection of probability distributions of dimension (*, N)
    """
    x = as_scores(x)
    if x.size == 0:
        return x
    dims = x.ndim
    # NOTE: for numerical stability, we shift the input by its maximum. This makes all exponents <=0.
    # For a vector x: Softmax(x) = Softmax(x - m); i.e., it is translation-invariant
    x_max = np.max(x, axis=dims - 1, keepdims=True)
    x_shifted = x - x_max
    exp_x_shifted = np.exp(x_shifted)
    sum_exp_x_shifted = np.sum(exp_x_shifted, axis=dims - 1, keepdims=True)
    out = exp_x_shifted / sum_exp_x_shifted
    return out


def sigmoid(x: ArrayLike) -> np.ndarray:
    """Compute the element-wise logistic sigmoid 1 / (1 + exp(-x))."""
    x = as_scores(x)
    # NOTE: exp is only ever taken of non-positive values, so large magnitudes cannot overflow.
    # For x < 0: 1 / (1 + exp(-x)) = exp(x) / (1 + exp(x))
    exp_neg_abs = np.exp(-np.abs(x))
    return np.where(x >= 0, 1 / (1 + exp_neg_abs), exp_neg_abs / (1 + exp_neg_abs))


def argmax(x: ArrayLike) -> int:
    """Index of the largest value; ties resolve to the lowest index."""
    x = as_scores(x)
    if x.ndim != 1 or x.size == 0:
        raise ValueError(f"Expected a non-empty 1-dimensional array, got shape {x.shape}")
    return int(np.argmax(x))


def top_k(x: ArrayLike, k: int) -> list[int]:
    """Get the indices of the `k` largest values in descending order of value.

    Ties are broken by the earliest index. `k` is clamped to the length of `x`.
    """
    if k < 0:
        raise ValueError(f"`k` must be non-negative, got {k}")
    x = as_scores(x)
    if x.ndim != 1:
        raise ValueError(f"Expected a 1-dimensional array, got shape {x.shape}")
    k = min(k, len(x))
    # NOTE: a stable sort on the negated values keeps equal values in index order
    order = np.argsort(-x, kind="stable")
    return [int(i) for i in order[:k]]
