"""Engine modules for choreclock.

Contains the pure computation engines:
- schedule_engine: Variant predicates and due-date searches
- chore_engine: Status derivation, classification and sorting
"""

# Use relative imports within package to avoid mypy module resolution issues
from . import schedule_engine
from .chore_engine import ChoreEngine, ChoreSnapshot

__all__ = [
    "ChoreEngine",
    "ChoreSnapshot",
    "schedule_engine",
]
