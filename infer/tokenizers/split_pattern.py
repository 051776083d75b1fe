"""Registry of available word split patterns for the BpeTokenizer."""

import functools

import regex


class SplitPattern:
    """Registry of word split patterns, keyed by the model family that defines them.

    A split pattern cuts normalized text into the words that BPE merges operate within; no merge
    ever crosses a word boundary.
    """

    _PATTERNS = {
        # CLIP keeps its sequence markers whole and splits digits one by one
        "clip": r"""<\|startoftext\|>|<\|endoftext\|>|'s|'t|'re|'ve|'m|'ll|'d|\p{L}+|\p{N}|[^\s\p{L}\p{N}]+""",
        "gpt-2": r"""'s|'t|'re|'ve|'m|'ll|'d| ?\p{L}+| ?\p{N}+| ?[^\s\p{L}\p{N}]+|\s+(?!\S)|\s+""",
        "gpt-4": r"""'(?i:[sdmt]|ll|ve|re)|[^\r\n\p{L}\p{N}]?+\p{L}+|\p{N}{1,3}| ?[^\s\p{L}\p{N}]++[\r\n]*|\s*[\r\n]|\s+(?!\S)|\s+"""  # noqa: E501
    }

    @classmethod
    def default_pattern_name(cls) -> str:
        """Name of the pattern used when a tokenizer is not given one."""
        return "clip"

    @classmethod
    def all_pattern_names(cls) -> list[str]:
        """Get all valid split pattern names."""
        return list(cls._PATTERNS.keys())

    @classmethod
    def get_pattern(cls, pattern_name: str) -> str:
        """Get the split pattern of the given name.

        Raises:
            ValueError: if no pattern has that name.
        """
        if pattern_name not in cls._PATTERNS:
            raise ValueError(f"Unrecognized pattern: '{pattern_name}'")
        return cls._PATTERNS[pattern_name]

    @classmethod
    @functools.cache
    def compile(cls, pattern_name: str) -> regex.Pattern:
        """Get the compiled split pattern of the given name, compiling it once per process."""
        return regex.compile(cls.get_pattern(pattern_name))
