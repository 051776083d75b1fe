"""Postprocessing of raw model outputs into ranked and decoded results."""

from .boxes import box_area, box_iou, center_to_corner_boxes, non_max_suppression
from .ctc import ctc_decode_text, greedy_sequence_decode
from .labels import Activation, Labels, ModelConfig, apply_activation, classify
