"""Helpers for reading tokenizer and label artifacts."""

import json
from os import PathLike
from typing import Any

from infer.exceptions import ConfigurationError


def load_text_file(file_path: PathLike) -> str:
    """Load a UTF-8 encoded text file into a string in memory."""
    with open(file_path, mode="r", encoding="utf-8") as f:
        text = f.read()
    return text


def load_text_lines(file_path: PathLike) -> list[str]:
    """Load a UTF-8 encoded text file as a list of lines without line terminators."""
    return load_text_file(file_path).splitlines()


def write_text_lines(file_path: PathLike, lines: list[str]) -> None:
    """Write a line-separated UTF-8 text file."""
    with open(file_path, mode="w", encoding="utf-8") as f:
        for line in lines:
            f.write(f"{line}\n")


def load_json_file(file_path: PathLike) -> Any:
    """Load a UTF-8 encoded JSON document.

    Raises:
        ConfigurationError: if the document is not valid JSON.
    """
    text = load_text_file(file_path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON: {e.msg}", source=str(file_path), line=e.lineno) from e


def write_json_file(file_path: PathLike, data: Any) -> None:
    """Write a UTF-8 encoded JSON document."""
    with open(file_path, mode="w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.write("\n")  # for shell readability with cat
