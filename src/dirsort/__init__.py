"""Organizes the files of a directory into category sub-folders."""

__version__ = "1.0.0"
