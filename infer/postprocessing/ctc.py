"""Greedy decoding of per-timestep class scores (CTC)."""

from typing import Sequence

import numpy as np
import regex

from infer.exceptions import ShapeError
from infer.tokenizers.vocabulary import Vocabulary
from infer.utils.math import ArrayLike, as_scores


_WHITESPACE = regex.compile(r"\s+")


def greedy_sequence_decode(
    scores: ArrayLike,
    time_steps: int,
    vocab_size: int,
    blank_index: int,
) -> list[int]:
    """Decode class scores by per-timestep argmax, collapsing repeats and dropping blanks.

    Args:
        scores: Scores of shape (time_steps, vocab_size), or a flat buffer in row-major order
        time_steps: Number of timesteps
        vocab_size: Number of classes per timestep
        blank_index: Class index of the CTC blank symbol

    Returns:
        The collapsed class indices
    """
    if time_steps < 0 or vocab_size < 0:
        raise ShapeError(f"Dimensions must be non-negative, got {time_steps=}, {vocab_size=}")
    s = as_scores(scores)
    if s.size != time_steps * vocab_size or s.ndim not in (1, 2):
        raise ShapeError(
            f"Scores of shape {s.shape} do not match {time_steps=} x {vocab_size=} "
            f"(expected {time_steps * vocab_size} values)"
        )
    if s.ndim == 2 and s.shape != (time_steps, vocab_size):
        raise ShapeError(f"Scores of shape {s.shape} do not match ({time_steps}, {vocab_size})")
    if time_steps == 0:
        return []
    if vocab_size == 0:
        raise ShapeError(f"Cannot take the argmax of {time_steps} empty timesteps")

    # NOTE: np.argmax returns the first occurrence of the maximum, so ties go to the lowest index
    best = np.argmax(s.reshape(time_steps, vocab_size), axis=-1)

    out: list[int] = []
    prev = -1
    for token in best:
        token = int(token)
        if token != prev:
            if token != blank_index:
                out.append(token)
            prev = token
    return out


def ctc_decode_text(
    indices: Sequence[int],
    vocab: Vocabulary,
    word_delimiter: str = "|",
) -> str:
    """Render collapsed CTC class indices as text.

    The word delimiter token becomes a space and whitespace runs are collapsed.

    Raises:
        UnknownIdError: if an index is not in the vocabulary.
    """
    pieces = [vocab.id_to_token(int(index)) for index in indices]
    text = "".join(" " if piece == word_delimiter else piece for piece in pieces)
    return _WHITESPACE.sub(" ", text).strip()
