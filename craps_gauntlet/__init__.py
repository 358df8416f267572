"""
Craps Gauntlet.

Turn-based craps roguelite: shooters fight a ten-monster gauntlet while
the other players bet for or against them.
"""

__version__ = "0.1.0"
