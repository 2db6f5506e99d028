"""Core building blocks for neo-capabilities."""
