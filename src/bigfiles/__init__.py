"""list-big-files - find the files eating your disk."""

__version__ = "0.1.0"
