"""Reader for HuggingFace `tokenizer.json` artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from os import PathLike
from typing import Any, Optional

from infer.constants import SUBWORD_PREFIX
from infer.data.loaders import load_json_file
from infer.exceptions import ConfigurationError
from infer.tokenizers.bpe_tokenizer import DecodingBpeTokenizer
from infer.tokenizers.merges import MergeTable, TokenPair
from infer.tokenizers.special_tokens import SpecialTokens
from infer.tokenizers.split_pattern import SplitPattern
from infer.tokenizers.vocabulary import Vocabulary, VocabularyBuilder
from infer.tokenizers.wordpiece_tokenizer import WordPieceTokenizer


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenizerJson:
    """The parts of a `tokenizer.json` needed to build a tokenizer."""

    model_type: str
    vocab: Vocabulary
    merges: Optional[MergeTable] = None
    unk_token: Optional[str] = None
    continuing_subword_prefix: Optional[str] = None
    end_of_word_suffix: Optional[str] = None
    lowercase: bool = False
    split_pattern: str = SplitPattern.default_pattern_name()
    add_prefix_space: bool = False
    added_tokens: dict[str, int] = field(default_factory=dict)
    special_ids: frozenset[int] = frozenset()


def _parse_merge(entry: Any, index: int, source: str) -> TokenPair:
    if isinstance(entry, str):
        parts = entry.split(" ")
    elif isinstance(entry, list):
        parts = entry
    else:
        raise ConfigurationError(f"Merge entry {index} must be a string or a list", source=source)
    if len(parts) != 2 or not all(isinstance(part, str) for part in parts):
        raise ConfigurationError(f"Merge entry {index} must have exactly 2 symbols: {entry!r}", source=source)
    return TokenPair(parts[0], parts[1])


def _find_lowercase(normalizer: Any) -> bool:
    if not isinstance(normalizer, dict):
        return False
    if normalizer.get("type") == "Lowercase":
        return True
    if normalizer.get("type") == "BertNormalizer":
        return bool(normalizer.get("lowercase", True))
    return any(_find_lowercase(child) for child in normalizer.get("normalizers", []))


def _find_byte_level(pre_tokenizer: Any) -> Optional[dict]:
    if not isinstance(pre_tokenizer, dict):
        return None
    if pre_tokenizer.get("type") == "ByteLevel":
        return pre_tokenizer
    for child in pre_tokenizer.get("pretokenizers", []):
        found = _find_byte_level(child)
        if found is not None:
            return found
    return None


def parse_tokenizer_json(data: Any, source: str = "<memory>") -> TokenizerJson:
    """Extract the vocabulary, merges and settings from a parsed `tokenizer.json` document.

    Added tokens are folded into the vocabulary when absent from it, and those marked `special` are
    collected so that decoding can skip them. A ByteLevel pre-tokenizer that does its own regex split
    selects the "gpt-2" split pattern; otherwise the split is left to the default pattern.
    """
    if not isinstance(data, dict) or not isinstance(data.get("model"), dict):
        raise ConfigurationError("Missing 'model' section", source=source)
    model = data["model"]

    model_type = model.get("type")
    if model_type is None:
        # older exports omit the type; merges identify BPE
        model_type = "BPE" if "merges" in model else "WordPiece"
    if model_type not in ("BPE", "WordPiece"):
        raise ConfigurationError(f"Unsupported tokenizer model type: '{model_type}'", source=source)

    raw_vocab = model.get("vocab")
    if not isinstance(raw_vocab, dict):
        raise ConfigurationError("'model.vocab' must be an object of token -> id", source=source)

    added_tokens: dict[str, int] = {}
    special_ids: set[int] = set()
    for i, entry in enumerate(data.get("added_tokens") or []):
        if not isinstance(entry, dict) or "content" not in entry or "id" not in entry:
            raise ConfigurationError(f"Added token {i} must have 'content' and 'id'", source=source)
        added_tokens[entry["content"]] = entry["id"]
        if entry.get("special", False):
            special_ids.add(entry["id"])

    builder = VocabularyBuilder(source=source)
    for token, token_id in raw_vocab.items():
        builder.add(token, token_id)
    for token, token_id in added_tokens.items():
        existing = raw_vocab.get(token)
        if existing is None:
            builder.add(token, token_id)
        elif existing != token_id:
            raise ConfigurationError(
                f"Added token {token!r} has id {token_id} but the vocabulary says {existing}", source=source
            )
    vocab = builder.build()

    merges: Optional[MergeTable] = None
    if model_type == "BPE":
        raw_merges = model.get("merges")
        if not isinstance(raw_merges, list):
            raise ConfigurationError("'model.merges' must be a list", source=source)
        merges = MergeTable(_parse_merge(entry, i, source) for i, entry in enumerate(raw_merges))

    split_pattern = SplitPattern.default_pattern_name()
    add_prefix_space = False
    byte_level = _find_byte_level(data.get("pre_tokenizer"))
    if byte_level is not None:
        add_prefix_space = bool(byte_level.get("add_prefix_space", False))
        # with use_regex off, a sibling Split pre-tokenizer (CLIP) does the splitting
        if byte_level.get("use_regex", True):
            split_pattern = "gpt-2"

    parsed = TokenizerJson(
        model_type=model_type,
        vocab=vocab,
        merges=merges,
        unk_token=model.get("unk_token"),
        continuing_subword_prefix=model.get("continuing_subword_prefix"),
        end_of_word_suffix=model.get("end_of_word_suffix"),
        lowercase=_find_lowercase(data.get("normalizer")),
        split_pattern=split_pattern,
        add_prefix_space=add_prefix_space,
        added_tokens=added_tokens,
        special_ids=frozenset(special_ids),
    )
    log.info(
        f"parsed {model_type} tokenizer from {source}: vocab_size={len(vocab)}, "
        f"merges={len(merges) if merges is not None else 0}"
    )
    return parsed


def load_tokenizer_json(file: PathLike) -> TokenizerJson:
    """Load and parse a `tokenizer.json` file."""
    return parse_tokenizer_json(load_json_file(file), source=str(file))


def wordpiece_from_tokenizer_json(file: PathLike) -> WordPieceTokenizer:
    """Build a WordPieceTokenizer from a `tokenizer.json` of type WordPiece."""
    parsed = load_tokenizer_json(file)
    if parsed.model_type != "WordPiece":
        raise ConfigurationError(f"Expected a WordPiece model, got '{parsed.model_type}'", source=str(file))
    special_tokens = SpecialTokens.from_vocabulary(
        parsed.vocab,
        cls_token="[CLS]",
        sep_token="[SEP]",
        unk_token=parsed.unk_token or "[UNK]",
    )
    return WordPieceTokenizer(
        parsed.vocab,
        special_tokens=special_tokens,
        subword_prefix=parsed.continuing_subword_prefix or SUBWORD_PREFIX,
    )


def bpe_from_tokenizer_json(
    file: PathLike,
    bos_token: Optional[str] = None,
    eos_token: Optional[str] = None,
    **kwargs,
) -> DecodingBpeTokenizer:
    """Build a DecodingBpeTokenizer from a `tokenizer.json` of type BPE.

    The end-of-word marker, lowercasing, split pattern and prefix space follow the file unless
    overridden through `kwargs`. Special added tokens are skipped on decode.
    """
    parsed = load_tokenizer_json(file)
    if parsed.model_type != "BPE" or parsed.merges is None:
        raise ConfigurationError(f"Expected a BPE model, got '{parsed.model_type}'", source=str(file))
    special_tokens = SpecialTokens.from_vocabulary(
        parsed.vocab,
        bos_token=bos_token,
        eos_token=eos_token,
        unk_token=parsed.unk_token,
    )
    kwargs.setdefault("end_of_word_marker", parsed.end_of_word_suffix)
    kwargs.setdefault("lowercase", parsed.lowercase)
    kwargs.setdefault("split_pattern", parsed.split_pattern)
    kwargs.setdefault("add_prefix_space", parsed.add_prefix_space)
    kwargs.setdefault("added_special_ids", parsed.special_ids)
    return DecodingBpeTokenizer(parsed.vocab, parsed.merges, special_tokens=special_tokens, **kwargs)
