"""Text encoding/decoding and numeric postprocessing around an inference engine."""

__version__ = "0.1.0"
