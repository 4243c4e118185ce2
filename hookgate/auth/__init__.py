"""Webhook signature verification."""

from .security import SignatureVerifier

__all__ = ["SignatureVerifier"]
