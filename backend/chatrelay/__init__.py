"""HTTP relay forwarding chat messages to a generative-language provider."""

__version__ = "0.1.0"
