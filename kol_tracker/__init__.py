"""KOL tracker backend package.

Having this file ensures the 'kol_tracker' directory is recognized as a
standard Python package during test discovery and installation.
"""

__all__: list[str] = []
