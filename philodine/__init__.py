"""Dining philosophers simulation: argument parsing, a service queue, the table and the threads that run it."""

__version__ = "0.1.0"
__all__ = ["parsing", "servicequeue", "simulation", "table"]