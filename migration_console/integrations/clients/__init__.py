"""Integration clients."""
