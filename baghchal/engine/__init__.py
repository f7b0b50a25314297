"""Move selection: static evaluation, alpha-beta search and policies."""

from .evaluator import Evaluator, TigerActivity, tiger_activity
from .search import EvaluationFn, SearchEngine, SearchNode, SearchResult, select_move
from .policies import EnginePolicy, Policy, RandomPolicy

__all__ = [
    "Evaluator",
    "TigerActivity",
    "tiger_activity",
    "EvaluationFn",
    "SearchEngine",
    "SearchNode",
    "SearchResult",
    "select_move",
    "EnginePolicy",
    "Policy",
    "RandomPolicy",
]
