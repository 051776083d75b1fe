"""Unit tests for vocabulary.py."""

from pathlib import Path
import tempfile
import unittest

from infer.exceptions import ConfigurationError, UnknownIdError
from infer.tokenizers.vocabulary import Vocabulary, VocabularyBuilder


class TestVocabularyBuilder(unittest.TestCase):
    """Unit tests for VocabularyBuilder."""

    def test_empty(self) -> None:
        vocab = VocabularyBuilder().build()
        self.assertEqual(len(vocab), 0)
        self.assertEqual(vocab.max_id, -1)

    def test_add_and_build(self) -> None:
        vocab = VocabularyBuilder().add("a", 0).add("b", 5).build()
        self.assertEqual(len(vocab), 2)
        self.assertEqual(vocab.token_to_id("b"), 5)
        self.assertEqual(vocab.id_to_token(0), "a")
        self.assertEqual(vocab.max_id, 5)

    def test_duplicate_token_raises(self) -> None:
        builder = VocabularyBuilder().add("a", 0)
        with self.assertRaises(ConfigurationError):
            builder.add("a", 1)

    def test_duplicate_id_raises(self) -> None:
        builder = VocabularyBuilder().add("a", 0)
        with self.assertRaises(ConfigurationError):
            builder.add("b", 0)

    def test_invalid_ids_raise(self) -> None:
        builder = VocabularyBuilder()
        with self.assertRaises(ConfigurationError):
            builder.add("a", -1)
        with self.assertRaises(ConfigurationError):
            builder.add("a", "1")  # type: ignore[arg-type]
        with self.assertRaises(ConfigurationError):
            builder.add("a", 1.0)  # type: ignore[arg-type]
        with self.assertRaises(ConfigurationError):
            builder.add("a", True)  # type: ignore[arg-type]

    def test_error_mentions_source_and_line(self) -> None:
        builder = VocabularyBuilder(source="vocab.txt").add("a", 0)
        with self.assertRaises(ConfigurationError) as ctx:
            builder.add("a", 1, line=2)
        self.assertIn("vocab.txt", str(ctx.exception))
        self.assertEqual(ctx.exception.line, 2)


class TestVocabulary(unittest.TestCase):
    """Unit tests for Vocabulary lookups."""

    def setUp(self) -> None:
        self.vocab = Vocabulary.from_mapping({"hell": 10, "o</w>": 3})

    def test_lookups(self) -> None:
        self.assertEqual(self.vocab.size, 2)
        self.assertEqual(self.vocab.token_to_id("hell"), 10)
        self.assertIsNone(self.vocab.token_to_id("missing"))
        self.assertEqual(self.vocab.id_to_token(3), "o</w>")
        self.assertIn("hell", self.vocab)
        self.assertNotIn("hello", self.vocab)
        self.assertEqual(sorted(self.vocab), ["hell", "o</w>"])

    def test_absent_id_raises(self) -> None:
        with self.assertRaises(UnknownIdError) as ctx:
            self.vocab.id_to_token(42)
        self.assertEqual(ctx.exception.index, 42)
        self.assertIn("42", str(ctx.exception))

    def test_get_token(self) -> None:
        self.assertEqual(self.vocab.get_token(10), "hell")
        self.assertIsNone(self.vocab.get_token(42))

    def test_read_only(self) -> None:
        with self.assertRaises(TypeError):
            self.vocab.token_to_id_map["x"] = 1  # type: ignore[index]
        with self.assertRaises(TypeError):
            self.vocab.id_to_token_map[1] = "x"  # type: ignore[index]

    def test_equality(self) -> None:
        self.assertEqual(self.vocab, Vocabulary.from_mapping({"o</w>": 3, "hell": 10}))
        self.assertNotEqual(self.vocab, Vocabulary.from_mapping({"hell": 10}))

    def test_from_mapping_is_all_or_nothing(self) -> None:
        with self.assertRaises(ConfigurationError):
            Vocabulary.from_mapping({"a": 0, "b": 1, "c": 1})


class TestVocabularyFiles(unittest.TestCase):
    """Unit tests for loading vocabularies from disk."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base_dir = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _write(self, name: str, content: str) -> Path:
        path = Path(self.base_dir, name)
        with open(path, mode="w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_from_json_file(self) -> None:
        path = self._write("vocab.json", '{"a": 0, "b</w>": 1, "\\u00e9": 2}')
        vocab = Vocabulary.from_json_file(path)
        self.assertEqual(len(vocab), 3)
        self.assertEqual(vocab.token_to_id("é"), 2)

    def test_from_json_file_not_an_object(self) -> None:
        path = self._write("vocab.json", '["a", "b"]')
        with self.assertRaises(ConfigurationError):
            Vocabulary.from_json_file(path)

    def test_from_json_file_invalid_json(self) -> None:
        path = self._write("vocab.json", '{"a": 0,')
        with self.assertRaises(ConfigurationError):
            Vocabulary.from_json_file(path)

    def test_from_json_file_bad_id(self) -> None:
        path = self._write("vocab.json", '{"a": "zero"}')
        with self.assertRaises(ConfigurationError):
            Vocabulary.from_json_file(path)

    def test_from_text_file(self) -> None:
        path = self._write("vocab.txt", "[PAD]\n[UNK]\n\nhello\n##ing\n")
        vocab = Vocabulary.from_text_file(path)
        self.assertEqual(len(vocab), 4)
        self.assertEqual(vocab.token_to_id("[PAD]"), 0)
        self.assertEqual(vocab.token_to_id("hello"), 3)  # blank line consumes id 2
        self.assertEqual(vocab.token_to_id("##ing"), 4)
        self.assertIsNone(vocab.get_token(2))

    def test_from_text_file_duplicate(self) -> None:
        path = self._write("vocab.txt", "a\nb\na\n")
        with self.assertRaises(ConfigurationError) as ctx:
            Vocabulary.from_text_file(path)
        self.assertEqual(ctx.exception.line, 3)
