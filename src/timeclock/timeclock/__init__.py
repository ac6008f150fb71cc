"""Tablet time-clock package.

Organized by feature modules (shifts, corrections, reports, ...) with a thin
Flask controller layer over service/repository layers.
"""
