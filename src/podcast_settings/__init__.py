"""Schema driven podcast settings: definition, rendering, persistence and scoped resolution."""

__version__ = "0.1.0"
