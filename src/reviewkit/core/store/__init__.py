"""Persistence collaborators: the store protocol and its in-memory and JSON adapters."""
