"""Implementation of a WordPiece tokenizer (greedy longest-match subwords)."""

from __future__ import annotations

import logging
from os import PathLike
from typing import Optional
import unicodedata

from infer.constants import SUBWORD_PREFIX
from infer.tokenizers.base import truncate_with_tail
from infer.tokenizers.encoded_input import EncodedInput
from infer.tokenizers.special_tokens import SpecialTokens
from infer.tokenizers.vocabulary import Vocabulary


log = logging.getLogger(__name__)

_PUNCTUATION_CATEGORIES = frozenset({"Pc", "Pd", "Pe", "Pf", "Pi", "Po", "Ps"})


def is_punctuation(ch: str) -> bool:
    """Check whether a character is in one of the Unicode punctuation categories."""
    return unicodedata.category(ch) in _PUNCTUATION_CATEGORIES


def basic_tokenize(text: str) -> list[str]:
    """Lowercase and split text on whitespace and punctuation.

    Every punctuation character becomes a word of its own.
    """
    words: list[str] = []
    current: list[str] = []

    for ch in text.lower().strip():
        if ch.isspace():
            if current:
                words.append("".join(current))
                current = []
        elif is_punctuation(ch):
            if current:
                words.append("".join(current))
                current = []
            words.append(ch)
        else:
            current.append(ch)

    if current:
        words.append("".join(current))

    return words


class WordPieceTokenizer:
    """Implementation of the WordPiece algorithm used by BERT-style encoders.

    Each word is segmented by greedy longest match against the vocabulary: the longest prefix found
    in the vocabulary is emitted, and matching resumes on the remainder with the `##` continuation
    prefix. If no prefix of the remainder matches, the whole word maps to the unknown token. There
    is no backtracking to alternative split points.
    """

    def __init__(
        self,
        vocab: Vocabulary,
        special_tokens: Optional[SpecialTokens] = None,
        subword_prefix: str = SUBWORD_PREFIX,
    ) -> None:
        """Initialize the tokenizer.

        When `special_tokens` is omitted, `[CLS]`, `[SEP]` and `[UNK]` are resolved from the vocabulary.

        Raises:
            ConfigurationError: if any of the classification, separator or unknown tokens is missing.
        """
        if special_tokens is None:
            special_tokens = SpecialTokens.from_vocabulary(
                vocab,
                cls_token="[CLS]",
                sep_token="[SEP]",
                unk_token="[UNK]",
            )
        self.vocab = vocab
        self.special_tokens = special_tokens
        self.subword_prefix = subword_prefix
        self.cls_id = special_tokens.require("cls_token").id
        self.sep_id = special_tokens.require("sep_token").id
        self.unk_id = special_tokens.require("unk_token").id

    @classmethod
    def from_vocab_file(
        cls,
        file: PathLike,
        special_tokens: Optional[SpecialTokens] = None,
    ) -> WordPieceTokenizer:
        """Instantiate a tokenizer from a `vocab.txt` with one token per line."""
        return cls(Vocabulary.from_text_file(file), special_tokens=special_tokens)

    @property
    def vocab_size(self) -> int:
        """The size of the tokenizer vocabulary."""
        return len(self.vocab)

    ######################################
    # Encoding
    ######################################

    def encode(self, text: str, max_length: int) -> EncodedInput:
        """Encode text as `[CLS] subwords [SEP]`, padded or truncated to `max_length`.

        Truncation drops trailing subwords and always keeps `[SEP]` last.
        """
        if max_length < 2:
            raise ValueError(f"`max_length` must be at least 2, got {max_length}")

        ids = [self.cls_id] + self.encode_ids(text) + [self.sep_id]
        ids = truncate_with_tail(ids, max_length, tail=self.sep_id)
        return EncodedInput.from_ids(ids, max_length)

    def encode_pair(self, text_a: str, text_b: str, max_length: int) -> EncodedInput:
        """Encode a sentence pair as `[CLS] a [SEP] b [SEP]`.

        The longer segment is truncated first, one id at a time (segment A on ties). Token type ids
        are 1 over segment B and its closing `[SEP]`.
        """
        if max_length < 3:
            raise ValueError(f"`max_length` must be at least 3, got {max_length}")

        ids_a = self.encode_ids(text_a)
        ids_b = self.encode_ids(text_b)

        available = max_length - 3
        len_a, len_b = len(ids_a), len(ids_b)
        while len_a + len_b > available:
            if len_b > len_a:
                len_b -= 1
            else:
                len_a -= 1

        segment_a = [self.cls_id] + ids_a[:len_a] + [self.sep_id]
        segment_b = ids_b[:len_b] + [self.sep_id]
        token_type_ids = [0] * len(segment_a) + [1] * len(segment_b)
        return EncodedInput.from_ids(segment_a + segment_b, max_length, token_type_ids=token_type_ids)

    def encode_ids(self, text: str) -> list[int]:
        """Encode text into subword ids, without special tokens or padding."""
        ids: list[int] = []
        for word in basic_tokenize(text):
            ids.extend(self._encode_word(word))
        return ids

    def tokenize(self, text: str) -> list[str]:
        """Split text into subword strings, with the unknown token text for unmatched words."""
        unk_text = self.special_tokens.require("unk_token").text
        pieces: list[str] = []
        for word in basic_tokenize(text):
            word_pieces = self._segment_word(word)
            pieces.extend(word_pieces if word_pieces is not None else [unk_text])
        return pieces

    ######################################
    # Private Methods
    ######################################

    def _encode_word(self, word: str) -> list[int]:
        pieces = self._segment_word(word)
        if pieces is None:
            log.debug(f"no subword match for {word!r}, using unknown token")
            return [self.unk_id]
        # every piece was matched against the vocabulary
        return [self.vocab.token_to_id_map[piece] for piece in pieces]

    def _segment_word(self, word: str) -> Optional[list[str]]:
        """Greedy longest-match segmentation. Returns None if some remainder has no matching prefix."""
        pieces: list[str] = []
        start = 0

        while start < len(word):
            end = len(word)
            match: Optional[str] = None
            while start < end:
                candidate = word[start:end]
                if start > 0:
                    candidate = self.subword_prefix + candidate
                if candidate in self.vocab:
                    match = candidate
                    break
                end -= 1

            if match is None:
                return None

            pieces.append(match)
            start = end

        return pieces
