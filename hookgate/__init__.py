"""HookGate - webhook intake gateway with queued, retried delivery."""

__version__ = "0.1.0"
