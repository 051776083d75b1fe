"""Registry of all assets."""

from pathlib import Path


class _BaseRegistry:

    @property
    def project_dir(self) -> Path:
        """Root directory for the git project."""
        return Path(__file__).parent.parent.parent

    @property
    def assets_dir(self) -> Path:
        """Root directory for all assets."""
        return Path(self.project_dir, "assets")


class TokenizerRegistry(_BaseRegistry):
    """Registry for tokenizer artifacts (vocabularies and merge tables)."""

    VOCAB_JSON = "vocab.json"
    VOCAB_TXT = "vocab.txt"
    MERGES_TXT = "merges.txt"
    TOKENIZER_JSON = "tokenizer.json"

    @property
    def tokenizer_dir(self) -> Path:
        """Root directory for all tokenizer artifacts."""
        return Path(self.assets_dir, "tokenizers")

    def checkpoint_dir(self, name: str) -> Path:
        """Directory holding the artifacts of the named tokenizer."""
        return Path(self.tokenizer_dir, name)


class LabelRegistry(_BaseRegistry):
    """Registry for class label files."""

    @property
    def labels_dir(self) -> Path:
        """Root directory for all label files."""
        return Path(self.assets_dir, "labels")

    def labels_file(self, name: str) -> Path:
        """Path of the named label file."""
        return Path(self.labels_dir, f"{name}.txt")
