"""Schematic Core Backend - HTTP surface for the schematic engine."""
