"""
Configuration package for the Hello World voice skill.

This package contains modules for managing application settings,
environment variables, and logging configuration.
"""

from voiceskill.config.settings import Settings

# Export settings singleton for app-wide use
settings = Settings()

__all__ = ["settings", "Settings"]
