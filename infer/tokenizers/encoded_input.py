"""Model-ready output of a tokenizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from infer.constants import PAD_ID, TokenDtype
from infer.exceptions import ShapeError


NumpyTokenSequence = NDArray[TokenDtype]


def _frozen_array(values: Sequence[int] | np.ndarray) -> NumpyTokenSequence:
    array = np.array(values, dtype=TokenDtype)
    if array.ndim != 1:
        raise ShapeError(f"Expected a 1-dimensional sequence, got shape {array.shape}")
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class EncodedInput:
    """Equal-length id, attention mask and segment id sequences.

    Attributes:
        input_ids: Token ids, padded with 0.
        attention_mask: 1 for real tokens, 0 for padding.
        token_type_ids: Segment id per position; all 0 for single-segment inputs.
    """

    input_ids: NumpyTokenSequence
    attention_mask: NumpyTokenSequence
    token_type_ids: NumpyTokenSequence

    def __post_init__(self) -> None:
        """Validate lengths and freeze the arrays."""
        input_ids = _frozen_array(self.input_ids)
        attention_mask = _frozen_array(self.attention_mask)
        token_type_ids = _frozen_array(self.token_type_ids)
        if not len(input_ids) == len(attention_mask) == len(token_type_ids):
            raise ShapeError(
                "Sequence lengths differ: "
                f"input_ids={len(input_ids)}, attention_mask={len(attention_mask)}, "
                f"token_type_ids={len(token_type_ids)}"
            )
        # NOTE: the dataclass is frozen, so normalized arrays are set through object.__setattr__
        object.__setattr__(self, "input_ids", input_ids)
        object.__setattr__(self, "attention_mask", attention_mask)
        object.__setattr__(self, "token_type_ids", token_type_ids)

    @classmethod
    def from_ids(
        cls,
        ids: Sequence[int],
        max_length: int,
        token_type_ids: Optional[Sequence[int]] = None,
    ) -> EncodedInput:
        """Pad an already truncated id sequence up to `max_length`."""
        n = len(ids)
        if n > max_length:
            raise ShapeError(f"Sequence of length {n} exceeds max_length={max_length}")
        if token_type_ids is not None and len(token_type_ids) != n:
            raise ShapeError(f"Expected {n} token type ids, got {len(token_type_ids)}")

        input_ids = np.full(max_length, PAD_ID, dtype=TokenDtype)
        input_ids[:n] = ids
        attention_mask = np.zeros(max_length, dtype=TokenDtype)
        attention_mask[:n] = 1
        segments = np.zeros(max_length, dtype=TokenDtype)
        if token_type_ids is not None:
            segments[:n] = token_type_ids
        return cls(input_ids=input_ids, attention_mask=attention_mask, token_type_ids=segments)

    @property
    def num_tokens(self) -> int:
        """The number of non-padding positions."""
        return int(np.sum(self.attention_mask))

    def content_ids(self) -> list[int]:
        """The ids of the non-padding positions."""
        return [int(token) for token in self.input_ids[self.attention_mask == 1]]

    def __len__(self) -> int:
        return len(self.input_ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EncodedInput):
            return NotImplemented
        return (
            np.array_equal(self.input_ids, other.input_ids)
            and np.array_equal(self.attention_mask, other.attention_mask)
            and np.array_equal(self.token_type_ids, other.token_type_ids)
        )
