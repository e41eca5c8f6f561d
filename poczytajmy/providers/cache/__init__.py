"""In-process caches."""

from poczytajmy.providers.cache.greeting_history import GreetingHistory, profile_key

__all__ = ["GreetingHistory", "profile_key"]
