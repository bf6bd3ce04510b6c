"""
nacelle-shared — Shared helpers for the Nacelle node sourcing connector.

  output_manager.py   Timestamped snapshot directories and retention-based
                      cleanup of old runs.
"""

from .output_manager import OutputManager
