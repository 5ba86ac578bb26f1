"""Configuration management for the hand recorder."""

from .config import ConfigManager, RecorderConfig

__all__ = ['ConfigManager', 'RecorderConfig']
