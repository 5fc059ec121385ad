"""py-zkbank: multi-party transaction workflow demo service."""

__version__ = "0.1.0"
