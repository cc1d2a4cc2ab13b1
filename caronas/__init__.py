"""Caronas - ride coordination bot for Telegram groups."""

__version__ = "1.0.0"
