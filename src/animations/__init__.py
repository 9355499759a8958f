"""
Built-in animations

Frame generators stored as scripts by `seed_scripts.py`.
"""

from .presets import PRESETS, Preset

__all__ = ["PRESETS", "Preset"]
