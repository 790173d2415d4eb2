"""
Text and graph engines
======================
Search ranking, link resolution, markup rendering and graph sampling.

Note: only workers.py and playback.py import PySide6; the rest is pure
Python/NumPy.
"""
