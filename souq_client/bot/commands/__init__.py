"""Slash command groups."""
