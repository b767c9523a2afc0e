"""Content management backend for course material and interview-prep documents."""

__version__ = "0.1.0"
