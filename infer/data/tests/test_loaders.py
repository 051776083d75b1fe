"""Unit tests for loaders.py"""

from pathlib import Path
import tempfile
import unittest

from infer.data.loaders import (
    load_json_file,
    load_text_file,
    load_text_lines,
    write_json_file,
    write_text_lines,
)
from infer.exceptions import ConfigurationError


class TestTextLines(unittest.TestCase):
    """Unit tests for writing/loading a line-separated text file."""

    def test_basic(self) -> None:
        data = ["some string", "", "Ġunicode é"]

        with tempfile.NamedTemporaryFile() as f:
            path = Path(f.name)
            write_text_lines(path, data)

            self.assertEqual(load_text_file(path), "some string\n\nĠunicode é\n")
            self.assertEqual(load_text_lines(path), data)


class TestJsonFile(unittest.TestCase):
    """Unit tests for writing/loading a JSON file."""

    def test_basic(self) -> None:
        data = {"hell": 10, "o</w>": 3, "é": [1, 2]}

        with tempfile.NamedTemporaryFile() as f:
            path = Path(f.name)
            write_json_file(path, data)

            data2 = load_json_file(path)
            self.assertEqual(data2, data)

    def test_invalid(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir, "broken.json")
            with open(path, mode="w", encoding="utf-8") as f:
                f.write('{"a": 1,\n"b": }')

            with self.assertRaises(ConfigurationError) as ctx:
                load_json_file(path)

        self.assertEqual(ctx.exception.line, 2)
        self.assertEqual(ctx.exception.source, str(path))
