"""Routine models, swap resolution and edits."""
