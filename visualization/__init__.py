"""Rendering and animation of cavity snapshots."""
