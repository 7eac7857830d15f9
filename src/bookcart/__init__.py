"""Book records with tolerant ordering and a quoted text codec."""

__version__ = "0.1.0"
