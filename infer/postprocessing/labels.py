"""Label resolution and activation selection for classification outputs."""

from __future__ import annotations

import enum
import logging
from os import PathLike
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

import numpy as np

from infer.data.loaders import load_json_file, load_text_lines
from infer.exceptions import ConfigurationError, UnknownIdError
from infer.utils.math import ArrayLike, as_scores, sigmoid, softmax, top_k


log = logging.getLogger(__name__)

MULTI_LABEL_PROBLEM_TYPE = "multi_label_classification"


class Activation(enum.Enum):
    """Function turning logits into scores."""

    SOFTMAX = "softmax"
    SIGMOID = "sigmoid"

    @classmethod
    def for_problem(cls, multi_label: bool) -> Activation:
        """Softmax for single-label problems, sigmoid for multi-label ones."""
        return cls.SIGMOID if multi_label else cls.SOFTMAX


def apply_activation(logits: ArrayLike, activation: Activation) -> np.ndarray:
    """Apply the selected activation along the last dimension."""
    if activation is Activation.SOFTMAX:
        return softmax(logits)
    if activation is Activation.SIGMOID:
        return sigmoid(logits)
    raise ValueError(f"Unrecognized activation: {activation!r}")


class Labels:
    """Ordered, immutable list of class labels indexed from 0."""

    def __init__(self, labels: Sequence[str]) -> None:
        """Initialize the labels."""
        self._labels: tuple[str, ...] = tuple(labels)

    @classmethod
    def from_file(cls, file: PathLike) -> Labels:
        """Load labels from a text file with one label per line."""
        labels = cls(load_text_lines(file))
        log.info(f"loaded {len(labels)} labels from {file}")
        return labels

    def get(self, index: int) -> str:
        """Get the label of a class index.

        Raises:
            UnknownIdError: if the index is out of range.
        """
        if not 0 <= index < len(self._labels):
            raise UnknownIdError(f"Class index out of range [0, {len(self._labels)})", index=index)
        return self._labels[index]

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)


class ModelConfig:
    """Classification settings from a HuggingFace style `config.json`: labels and problem type."""

    def __init__(self, id2label: Mapping[int, str], problem_type: Optional[str] = None) -> None:
        """Initialize the config."""
        self._id2label = MappingProxyType(dict(id2label))
        self.problem_type = problem_type

    @classmethod
    def from_dict(cls, data: Any, source: Optional[str] = None) -> ModelConfig:
        """Build a config from a parsed `config.json` document."""
        if not isinstance(data, dict):
            raise ConfigurationError("Model config must be a JSON object", source=source)

        id2label: dict[int, str] = {}
        raw = data.get("id2label") or {}
        if not isinstance(raw, dict):
            raise ConfigurationError("'id2label' must be an object of index -> label", source=source)
        for key, label in raw.items():
            try:
                index = int(key)
            except ValueError as e:
                raise ConfigurationError(f"Invalid class index in 'id2label': {key!r}", source=source) from e
            id2label[index] = str(label)

        problem_type = data.get("problem_type")
        if problem_type is not None and not isinstance(problem_type, str):
            raise ConfigurationError(f"'problem_type' must be a string, got {problem_type!r}", source=source)
        return cls(id2label, problem_type)

    @classmethod
    def from_file(cls, file: PathLike) -> ModelConfig:
        """Load a config from a `config.json` file."""
        return cls.from_dict(load_json_file(file), source=str(file))

    @property
    def num_labels(self) -> int:
        """The number of classes."""
        return len(self._id2label)

    @property
    def is_multi_label(self) -> bool:
        """Whether each class is scored independently."""
        return self.problem_type == MULTI_LABEL_PROBLEM_TYPE

    @property
    def activation(self) -> Activation:
        """The activation matching the problem type."""
        return Activation.for_problem(self.is_multi_label)

    def label(self, index: int) -> str:
        """Get the label of a class index.

        Raises:
            UnknownIdError: if the index is not in `id2label`.
        """
        label = self._id2label.get(index)
        if label is None:
            raise UnknownIdError("Class index not in id2label", index=index)
        return label


def classify(
    logits: ArrayLike,
    labels: Union[Labels, ModelConfig],
    activation: Activation = Activation.SOFTMAX,
    k: int = 5,
) -> list[tuple[str, float]]:
    """Score a single logit vector and return the `k` best (label, score) pairs, best first."""
    scores = apply_activation(as_scores(logits), activation)
    resolve = labels.get if isinstance(labels, Labels) else labels.label
    return [(resolve(i), float(scores[i])) for i in top_k(scores, k)]
