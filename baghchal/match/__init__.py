"""Match orchestration."""

from .controller import MatchController

__all__ = ["MatchController"]
