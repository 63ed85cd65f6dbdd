# File: utils/__init__.py
"""Pure Python utilities for choreclock.

Submodules:
    - dt_utils: Date/time parsing, localization and display formatting
    - day_range: "1, 4-7, 15-17" day-range notation

Usage:
    from . import dt_utils
    from .day_range import parse_day_range
"""

from . import day_range, dt_utils

__all__ = ["day_range", "dt_utils"]
