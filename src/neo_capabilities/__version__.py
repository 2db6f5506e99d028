"""Version information for neo-capabilities."""

__version__ = "0.1.0"
