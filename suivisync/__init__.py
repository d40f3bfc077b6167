"""suivisync - task state synchronization engine for the Suivi mobile client."""

__version__ = "0.1.0"
