"""Implementation of a merge-driven BPE tokenizer with regex-based word splitting."""

from __future__ import annotations

import logging
from os import PathLike
from typing import Iterable, Optional, Sequence

import regex

from infer.constants import DEFAULT_BPE_MAX_LENGTH, END_OF_WORD_MARKER
from infer.tokenizers import bpe
from infer.tokenizers.base import truncate_with_tail
from infer.tokenizers.encoded_input import EncodedInput
from infer.tokenizers.merges import MergeTable
from infer.tokenizers.special_tokens import SpecialTokens
from infer.tokenizers.split_pattern import SplitPattern
from infer.tokenizers.vocabulary import Vocabulary


log = logging.getLogger(__name__)

_WHITESPACE = regex.compile(r"\s+")


class BpeTokenizer:
    """Implementation of a BPE tokenizer driven by a ranked merge table.

    Text is normalized (whitespace collapsed, optionally lowercased), split into words with a regex
    pattern and, optionally, mapped to a printable byte-level alphabet. Each word is split into
    characters with an end-of-word marker attached to the last one, and the adjacent pair with the
    lowest merge rank is merged repeatedly until no ranked pair remains.
    """

    def __init__(
        self,
        vocab: Vocabulary,
        merges: MergeTable,
        special_tokens: Optional[SpecialTokens] = None,
        split_pattern: str = SplitPattern.default_pattern_name(),
        add_prefix_space: bool = False,
        lowercase: bool = True,
        end_of_word_marker: Optional[str] = END_OF_WORD_MARKER,
        byte_level: bool = True,
        default_max_length: int = DEFAULT_BPE_MAX_LENGTH,
        added_special_ids: Iterable[int] = (),
    ) -> None:
        """Initialize the tokenizer.

        Args:
            vocab: Mapping of BPE symbols to ids.
            merges: Merge rules in priority order.
            special_tokens: Optional BOS/EOS tokens wrapped around every sequence, and an optional
                unknown token used for symbols absent from the vocabulary (otherwise they are dropped).
            split_pattern: Name of the SplitPattern used to split normalized text into words.
            add_prefix_space: Whether a space is prepended to the normalized text, so that the first
                word is split and merged like every other word (GPT-2 style byte-level files).
            lowercase: Whether to lowercase text before splitting.
            end_of_word_marker: Suffix attached to the last symbol of each word, or None.
            byte_level: Whether words are mapped through the reversible byte -> unicode table.
            default_max_length: Sequence length used when encode() is called without one.
            added_special_ids: Further ids that decoding skips, such as the special added tokens of
                a `tokenizer.json`.
        """
        if default_max_length < 1:
            raise ValueError(f"`default_max_length` must be positive, got {default_max_length}")

        self.vocab = vocab
        self.merges = merges
        self.special_tokens = special_tokens if special_tokens is not None else SpecialTokens()
        self.split_pattern = split_pattern
        self.pattern = SplitPattern.compile(split_pattern)
        self.add_prefix_space = add_prefix_space
        self.lowercase = lowercase
        self.end_of_word_marker = end_of_word_marker
        self.byte_level = byte_level
        self.default_max_length = default_max_length

        bos = self.special_tokens.bos_token
        eos = self.special_tokens.eos_token
        unk = self.special_tokens.unk_token
        self.bos_id: Optional[int] = bos.id if bos is not None else None
        self.eos_id: Optional[int] = eos.id if eos is not None else None
        self.unk_id: Optional[int] = unk.id if unk is not None else None
        self.special_ids = self.special_tokens.ids | frozenset(added_special_ids)

        self.merge_dict = dict(merges.ranks)

    @classmethod
    def from_files(
        cls,
        vocab_json: PathLike,
        merges_txt: PathLike,
        bos_token: Optional[str] = None,
        eos_token: Optional[str] = None,
        unk_token: Optional[str] = None,
        **kwargs,
    ) -> BpeTokenizer:
        """Instantiate a tokenizer from a `vocab.json` and a `merges.txt`.

        Special tokens are given by their text and resolved against the vocabulary. Remaining keyword
        arguments are forwarded to the constructor.
        """
        vocab = Vocabulary.from_json_file(vocab_json)
        merges = MergeTable.from_file(merges_txt)
        special_tokens = SpecialTokens.from_vocabulary(
            vocab,
            bos_token=bos_token,
            eos_token=eos_token,
            unk_token=unk_token,
        )
        return cls(vocab, merges, special_tokens=special_tokens, **kwargs)

    @property
    def vocab_size(self) -> int:
        """The size of the tokenizer vocabulary."""
        return len(self.vocab)

    ######################################
    # Encoding
    ######################################

    def encode(self, text: str, max_length: Optional[int] = None) -> EncodedInput:
        """Encode text as `[BOS] ids [EOS]`, padded or truncated to `max_length`.

        BOS and EOS are only present when configured. Truncation removes trailing content ids and
        keeps a configured EOS last.
        """
        if max_length is None:
            max_length = self.default_max_length
        num_special = int(self.bos_id is not None) + int(self.eos_id is not None)
        if max_length < max(1, num_special):
            raise ValueError(f"`max_length` must be at least {max(1, num_special)}, got {max_length}")

        ids = self.encode_ids(text)
        if self.bos_id is not None:
            ids.insert(0, self.bos_id)
        if self.eos_id is not None:
            ids.append(self.eos_id)
        ids = truncate_with_tail(ids, max_length, tail=self.eos_id)
        return EncodedInput.from_ids(ids, max_length)

    def encode_ids(self, text: str) -> list[int]:
        """Encode text into content ids, without special tokens or padding."""
        ids: list[int] = []
        for word in self._split(text):
            ids.extend(self._encode_word(word))
        return ids

    def tokenize(self, text: str) -> list[str]:
        """Split text into BPE symbols, before the vocabulary lookup."""
        symbols: list[str] = []
        for word in self._split(text):
            symbols.extend(self._merge_word(word))
        return symbols

    def normalize(self, text: str) -> str:
        """Collapse whitespace runs into single spaces and, if configured, lowercase."""
        text = _WHITESPACE.sub(" ", text.strip())
        if self.lowercase:
            text = text.lower()
        return text

    ######################################
    # Private Methods
    ######################################

    def _split(self, text: str) -> list[str]:
        text = self.normalize(text)
        if self.add_prefix_space and text:
            text = " " + text
        return [match.group() for match in self.pattern.finditer(text, concurrent=False)]

    def _merge_word(self, word: str) -> list[str]:
        if self.byte_level:
            word = bpe.encode_word_bytes(word)
        return bpe.encode_word(word, self.merge_dict, end_of_word_marker=self.end_of_word_marker)

    def _encode_word(self, word: str) -> list[int]:
        ids: list[int] = []
        for symbol in self._merge_word(word):
            token_id = self.vocab.token_to_id(symbol)
            if token_id is not None:
                ids.append(token_id)
            elif self.unk_id is not None:
                log.debug(f"symbol {symbol!r} not in vocabulary, using unknown token")
                ids.append(self.unk_id)
            else:
                log.debug(f"symbol {symbol!r} not in vocabulary, dropped")
        return ids


class DecodingBpeTokenizer(BpeTokenizer):
    """BpeTokenizer that can also map ids back to text.

    Decoding is a pure lookup-and-join: merge priorities are never consulted.
    """

    def decode(self, tokens: Sequence[int], errors: str = "replace") -> str:
        """Decode a sequence of ids into text.

        Special and unmapped ids are skipped. End-of-word markers become spaces, and the trailing
        space left by the final word is removed. With `add_prefix_space`, the prepended space is
        removed as well.
        """
        fragments: list[str] = []
        for token in tokens:
            token = int(token)
            if token in self.special_ids:
                continue
            symbol = self.vocab.get_token(token)
            if symbol is None:
                continue
            fragments.append(symbol)
        text = self._render("".join(fragments), errors=errors)
        if self.end_of_word_marker is not None:
            text = text.rstrip(" ")
        if self.add_prefix_space and text.startswith(" "):
            text = text[1:]
        return text

    def decode_token(self, token: int, errors: str = "replace") -> str:
        """Decode a single id into a text fragment; empty for special or unmapped ids."""
        if token in self.special_ids:
            return ""
        symbol = self.vocab.get_token(token)
        if symbol is None:
            return ""
        return self._render(symbol, errors=errors)

    def _render(self, joined: str, errors: str) -> str:
        # NOTE: the end-of-word marker is printable ASCII, so it survives the byte-level inversion
        if self.byte_level:
            joined = bpe.decode_word_bytes(joined, errors=errors)
        if self.end_of_word_marker is not None:
            joined = joined.replace(self.end_of_word_marker, " ")
        return joined
