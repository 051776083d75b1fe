"""Utilities for implementing the Byte-Pair Encoding (BPE) algorithm over string symbols."""

import functools
from typing import Optional

from infer.tokenizers.merges import MergeDict, TokenPair


@functools.cache
def bytes_to_unicode() -> dict[int, str]:
    """Map every byte value to a printable unicode character.

    Printable Latin-1 bytes map to themselves; the remaining bytes (control characters, space, etc.)
    are shifted to code points from 256 upwards so that every byte has a visible, reversible symbol.

    Ref: https://github.com/openai/gpt-2/blob/9b63575ef42771a015060c964af2c3da4cf7c8ab/src/encoder.py#L9
    """
    byte_values = (
        list(range(ord("!"), ord("~") + 1))
        + list(range(ord("¡"), ord("¬") + 1))
        + list(range(ord("®"), ord("ÿ") + 1))
    )
    mapping = {b: chr(b) for b in byte_values}
    n = 0
    for b in range(256):
        if b not in mapping:
            mapping[b] = chr(256 + n)
            n += 1
    return mapping


@functools.cache
def unicode_to_bytes() -> dict[str, int]:
    """Inverse of bytes_to_unicode()."""
    return {char: b for b, char in bytes_to_unicode().items()}


def encode_word_bytes(word: str) -> str:
    """Represent the UTF-8 bytes of a word with one printable character per byte."""
    byte_encoder = bytes_to_unicode()
    return "".join(byte_encoder[b] for b in word.encode("utf-8"))


def decode_word_bytes(text: str, errors: str = "replace") -> str:
    """Invert encode_word_bytes(). Characters outside the byte table are dropped."""
    byte_decoder = unicode_to_bytes()
    data = bytes(byte_decoder[char] for char in text if char in byte_decoder)
    return data.decode("utf-8", errors=errors)


def split_word(word: str, end_of_word_marker: Optional[str] = None) -> list[str]:
    """Split a word into single-character symbols, tagging the last one with the end-of-word marker."""
    if len(word) == 0:
        return []
    symbols = list(word)
    if end_of_word_marker is not None:
        symbols[-1] = symbols[-1] + end_of_word_marker
    return symbols


def merge(symbols: list[str], pair: TokenPair) -> list[str]:
    """Replace all non-overlapping occurences of `pair`, scanning left to right.

    Returns:
        A new list with all possible replacements performed.
    """
    merged = pair.merged
    out: list[str] = []
    i = 0
    n = len(symbols)
    while i < n:
        if i < n - 1 and symbols[i] == pair.first and symbols[i + 1] == pair.second:
            out.append(merged)
            i += 2
        else:
            out.append(symbols[i])
            i += 1
    return out


def encode_symbols(symbols: list[str], merge_dict: MergeDict) -> list[str]:
    """Apply merges to a symbol sequence according to a merge priority.

    Each iteration merges the adjacent pair of lowest rank. Every merge reduces the number of
    symbols, so the loop runs at most len(symbols) - 1 times.
    """
    while len(symbols) > 1:
        best_pair: Optional[TokenPair] = None
        best_rank: Optional[int] = None
        for first, second in zip(symbols, symbols[1:]):
            pair = TokenPair(first, second)
            rank = merge_dict.get(pair)
            if rank is not None and (best_rank is None or rank < best_rank):
                best_pair, best_rank = pair, rank
        if best_pair is None:
            break  # no merge candidates left
        symbols = merge(symbols, best_pair)
    return symbols


def encode_word(word: str, merge_dict: MergeDict, end_of_word_marker: Optional[str] = None) -> list[str]:
    """Encode a word into BPE symbols according to a merge priority."""
    return encode_symbols(split_word(word, end_of_word_marker), merge_dict)
