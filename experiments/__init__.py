"""
Advanced experiments for the random-access contention simulator.

This module contains specialized experiments that go beyond the single
default comparison:

    - density_sweep.py: How each backoff algorithm saturates as the
      device population grows

These experiments show where each window-control policy stops scaling,
not just which one wins on the default scenario.
"""

__all__ = ["density_sweep"]
