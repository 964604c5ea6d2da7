"""
mmlayout - layout engine for memory-map editors.

Keeps bit fields, registers and address blocks packed and non-overlapping
while they are inserted, moved and repacked.
"""

__version__ = "0.1.0"
