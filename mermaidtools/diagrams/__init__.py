"""Diagram sources: discovery, loading and built-in templates."""
