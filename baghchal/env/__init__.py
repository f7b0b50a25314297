"""Gymnasium environment wrapping a Bagh-Chal match."""

from .gym_env import BaghChalEnv

__all__ = ["BaghChalEnv"]
