"""Capabilities shared by tokenizer families."""

from typing import Optional, Protocol, Sequence, runtime_checkable

from infer.tokenizers.encoded_input import EncodedInput


@runtime_checkable
class TextEncoder(Protocol):
    """Anything that turns text into a model-ready EncodedInput."""

    def encode(self, text: str, max_length: Optional[int]) -> EncodedInput:
        """Encode text, padded or truncated to `max_length`."""
        ...


@runtime_checkable
class TextDecoder(Protocol):
    """Anything that turns token ids back into text."""

    def decode(self, tokens: Sequence[int]) -> str:
        """Decode a sequence of token ids into text."""
        ...

    def decode_token(self, token: int) -> str:
        """Decode a single token id into a text fragment."""
        ...


def truncate_with_tail(ids: list[int], max_length: int, tail: Optional[int]) -> list[int]:
    """Truncate `ids` to `max_length`, keeping `tail` as the last id when it is given.

    `ids` is expected to already end with `tail` when `tail` is not None.
    """
    if len(ids) <= max_length:
        return ids
    if tail is None:
        return ids[:max_length]
    return ids[: max_length - 1] + [tail]
