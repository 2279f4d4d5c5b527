"""Ranked level list: points, leaderboard titles, bans and moderation."""

__version__ = "0.1.0"
