"""Alertmanager to Mattermost webhook bridge."""

__version__ = "0.1.0"
