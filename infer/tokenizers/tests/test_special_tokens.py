"""Unit tests for special_tokens.py."""

import unittest

from infer.exceptions import ConfigurationError
from infer.tokenizers.special_tokens import SpecialToken, SpecialTokens
from infer.tokenizers.vocabulary import Vocabulary


class TestSpecialTokens(unittest.TestCase):
    """Unit tests for SpecialTokens."""

    def setUp(self) -> None:
        self.vocab = Vocabulary.from_mapping({"[CLS]": 101, "[SEP]": 102, "[UNK]": 100, "a": 1})

    def test_from_vocabulary(self) -> None:
        tokens = SpecialTokens.from_vocabulary(self.vocab, cls_token="[CLS]", sep_token="[SEP]")
        self.assertEqual(tokens.cls_token, SpecialToken("[CLS]", 101))
        self.assertEqual(tokens.require("sep_token").id, 102)
        self.assertIsNone(tokens.unk_token)
        self.assertEqual(tokens.ids, frozenset({101, 102}))
        self.assertEqual(tokens.texts, frozenset({"[CLS]", "[SEP]"}))

    def test_from_vocabulary_skips_none(self) -> None:
        tokens = SpecialTokens.from_vocabulary(self.vocab, bos_token=None)
        self.assertIsNone(tokens.bos_token)
        self.assertEqual(tokens.ids, frozenset())

    def test_from_vocabulary_missing_token(self) -> None:
        with self.assertRaises(ConfigurationError):
            SpecialTokens.from_vocabulary(self.vocab, bos_token="<|startoftext|>")

    def test_unknown_role(self) -> None:
        with self.assertRaises(ConfigurationError):
            SpecialTokens.from_vocabulary(self.vocab, mask_token="[CLS]")
        with self.assertRaises(ConfigurationError):
            SpecialTokens().get("mask_token")

    def test_require_missing(self) -> None:
        with self.assertRaises(ConfigurationError):
            SpecialTokens().require("eos_token")

    def test_ids_outside_vocabulary(self) -> None:
        tokens = SpecialTokens(
            bos_token=SpecialToken("<|startoftext|>", 100),
            eos_token=SpecialToken("<|endoftext|>", 101),
        )
        self.assertEqual(tokens.ids, frozenset({100, 101}))

    def test_immutable(self) -> None:
        tokens = SpecialTokens()
        with self.assertRaises(AttributeError):
            tokens.cls_token = SpecialToken("[CLS]", 1)  # type: ignore[misc]
