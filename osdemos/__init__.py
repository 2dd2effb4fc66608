"""Runnable demonstrations of processes, threads, synchronisation, scheduling and persistence."""

__version__ = "0.1.0"