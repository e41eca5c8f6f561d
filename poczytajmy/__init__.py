"""poczytajmy-backend: AI proxy for a children's reading-practice app."""

__version__ = "1.6.0"
