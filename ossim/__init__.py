"""Simulations of classic operating-system algorithms and small card-driven virtual machines."""

__version__ = "0.1.0"