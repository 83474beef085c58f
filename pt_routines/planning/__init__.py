"""Routine planning: eligibility, selection, day distribution, assembly, validation.

Entry point is ``pt_routines.planning.generate.generate_routine``.
"""
