"""Bagh-Chal (Tiger vs. Goat) rules engine and search AI."""

from . import core, engine, env, evaluation, features, match
from .config import (
    AppConfig,
    ConfigError,
    EvaluationWeights,
    MatchConfig,
    SearchConfig,
    load_config,
)
from .core import Cell, Difficulty, GameMode, MatchState, Move, Phase
from .engine import EnginePolicy, Evaluator, Policy, RandomPolicy, SearchEngine, select_move
from .env import BaghChalEnv
from .evaluation import EvaluationResult, evaluate_policies
from .match import MatchController

__all__ = [
    "core",
    "engine",
    "env",
    "evaluation",
    "features",
    "match",
    "AppConfig",
    "ConfigError",
    "EvaluationWeights",
    "MatchConfig",
    "SearchConfig",
    "load_config",
    "Cell",
    "Difficulty",
    "GameMode",
    "MatchState",
    "Move",
    "Phase",
    "EnginePolicy",
    "Evaluator",
    "Policy",
    "RandomPolicy",
    "SearchEngine",
    "select_move",
    "BaghChalEnv",
    "EvaluationResult",
    "evaluate_policies",
    "MatchController",
]
