"""Attempt state - bookkeeping for a single retried call"""

from dataclasses import dataclass


@dataclass
class AttemptState:
    """Attempt counter owned by one executor call, never shared"""

    attempts: int = 0  # Incremented right before each execution

    def begin(self) -> int:
        """Register a new attempt and return its 1-based number"""
        self.attempts += 1
        return self.attempts
