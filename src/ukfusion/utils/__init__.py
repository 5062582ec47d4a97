"""Shared utility functions for ukfusion.

Provides angle wrap-around helpers used by the predictor and the radar
updater.
"""

from ukfusion.utils._angle import normalize_angle, normalize_component

__all__ = [
    "normalize_angle",
    "normalize_component",
]
