"""
Configuration package for the leave approval workflow.
"""

from leave_approval.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
