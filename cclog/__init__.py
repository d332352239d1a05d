"""Browse Claude Code conversation history from the terminal."""

__version__ = '0.1.0'
