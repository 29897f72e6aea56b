"""Client side of the ABD atomic register, with its messages, channels and connection pools."""

__version__ = "0.0.1"