"""Prompt rendering and assembly."""
