"""Processing layer - Note-level post-processing.

This layer refines extracted notes:
- Quantization (snap start times and durations to a grid)
"""

from .quantize import Quantizer, quantize_notes

__all__ = [
    "Quantizer",
    "quantize_notes",
]
