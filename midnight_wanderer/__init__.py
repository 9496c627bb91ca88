"""Hogwarts: Midnight Wanderer, an illustrated text adventure."""

__version__ = "0.1.0"
