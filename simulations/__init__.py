"""Drivers for the cavity solver."""
