"""Game and utility logic for group chat bots: marriages, cooldowns, sign-in, sleep, tarot and more."""

__version__ = "0.1.0"