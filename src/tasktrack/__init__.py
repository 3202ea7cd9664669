"""tasktrack: categorized task tracking with durable local state."""

__version__ = "0.1.0"
