"""Taskroom: collaborative project and task tracker with live project rooms."""

__version__ = "0.1.0"
