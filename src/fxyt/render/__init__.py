"""Rendering subsystem.

Drives the evaluator over the whole canvas and time axis, collects frame
buffers, and exports them as an animated GIF.
"""

from __future__ import annotations
