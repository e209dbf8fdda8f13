"""
Configuration package for the rusunawa booking core.
"""

from rusunawa.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
