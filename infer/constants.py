"""Configuration constants."""

from typing import Union

import numpy as np


DType = Union[str, np.dtype, type]
DEFAULT_DTYPE: DType = np.float64

TokenDtype = np.int64
"""Integer dtype for token ids, attention masks and segment ids handed to the engine."""

PAD_ID = 0

DEFAULT_BPE_MAX_LENGTH = 77
END_OF_WORD_MARKER = "</w>"
SUBWORD_PREFIX = "##"
