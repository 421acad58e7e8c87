"""Voice-enabled chat client with a deliberately rude persona."""

__version__ = "0.1.0"
