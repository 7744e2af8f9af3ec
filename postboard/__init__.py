"""Postboard account service: registration, login and password recovery."""

__version__ = "0.1.0"
