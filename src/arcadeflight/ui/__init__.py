"""Presentation layer: HUD panels and the 3D viewport."""
