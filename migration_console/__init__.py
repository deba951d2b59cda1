"""Migration console backend: Catalyst policy/document proxy routes."""
