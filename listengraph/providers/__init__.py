"""Concrete adapters for the interfaces in ``listengraph.interfaces``."""
