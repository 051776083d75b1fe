"""Subword tokenizers producing model-ready id sequences."""

from .base import TextDecoder, TextEncoder
from .bpe_tokenizer import BpeTokenizer, DecodingBpeTokenizer
from .encoded_input import EncodedInput
from .merges import MergeTable, TokenPair
from .special_tokens import SpecialToken, SpecialTokens
from .split_pattern import SplitPattern
from .vocabulary import Vocabulary, VocabularyBuilder
from .wordpiece_tokenizer import WordPieceTokenizer
