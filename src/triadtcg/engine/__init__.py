"""Deterministic, headless battle engine for TriadTCG.

IMPORTANT: This package must never import pygame.
"""

from .actions import PlaceCardAction
from .ai import AISpec, Tier, select_ai_move, tier_for_stage
from .battle import BattleConfig, BattleState, ai_take_turn, new_battle, step
from .board import neighbors_of, preview_flips, resolve_flips, tally_score
from .types import Card, Move, NeighborDescriptor, Score, Side

__all__ = [
    "AISpec",
    "BattleConfig",
    "BattleState",
    "Card",
    "Move",
    "NeighborDescriptor",
    "PlaceCardAction",
    "Score",
    "Side",
    "Tier",
    "ai_take_turn",
    "neighbors_of",
    "new_battle",
    "preview_flips",
    "resolve_flips",
    "select_ai_move",
    "step",
    "tally_score",
    "tier_for_stage",
]
