"""babbler - a Markov-chain chatter that learns from what it hears."""

__version__ = "0.1.0"
