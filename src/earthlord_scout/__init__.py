"""Density-driven POI selection and GPS territory building for survival exploration."""

__version__ = "0.1.0"
