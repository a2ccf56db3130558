"""Test helpers for Tech Radar."""
