"""
Tech Radar - voting events for technology radars.

Participants rate technologies on the four radar rings (assess, trial,
adopt, hold). Votes are aggregated into per-technology blips, contested
technologies are sent back for a revote, and each voting event advances
through an ordered flow of rounds.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
