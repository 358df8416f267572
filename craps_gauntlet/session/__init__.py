"""
Craps Gauntlet Session.

Stateful game driver for a single UI event loop.
"""

from craps_gauntlet.session.game_session import GameSession

__all__ = ["GameSession"]
