"""Evaluation helpers: pit policies against each other."""

from .match import EvaluationResult, GameRecord, evaluate_policies, play_game

__all__ = ["EvaluationResult", "GameRecord", "evaluate_policies", "play_game"]
