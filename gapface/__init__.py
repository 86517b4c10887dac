"""Haar-cascade face detection with an integer image pipeline."""

__version__ = "0.1.0"

__all__ = ["cascade", "detector", "draw", "kernels", "pyramid"]