# -*- coding: utf-8 -*-
"""
Python implementation of the merge puzzle.

This module provides the `TileMergeGame` class, which keeps the state of one game and applies the player's commands.
"""

from .game import TileMergeGame

__all__ = ["TileMergeGame"]
