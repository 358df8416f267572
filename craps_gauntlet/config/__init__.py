"""
Craps Gauntlet Configuration.

Environment variables, settings, and logging configuration.
"""

from craps_gauntlet.config.settings import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
