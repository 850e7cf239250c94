"""
Per-evaluation counters for the matcher.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EvaluationContext:
    """
    Counters accumulated by a single parse.

    A fresh context is created for every evaluate() call; it is never
    shared between calls or reused across trees.
    """
    match_count: int = 0       # Successful literal prefix matches
    comparison_count: int = 0  # Sum of node sizes over every parse call

    def merge(self, other: "EvaluationContext") -> "EvaluationContext":
        """Return a context holding the sum of both counters."""
        return EvaluationContext(
            match_count=self.match_count + other.match_count,
            comparison_count=self.comparison_count + other.comparison_count,
        )
