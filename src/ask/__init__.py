"""ask - query Claude or another LLM from the terminal."""

__version__ = "0.1.0"
