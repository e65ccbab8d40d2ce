"""Boundary layer: persistence and outbound notification adapters."""
