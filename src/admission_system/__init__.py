"""Admission System package.

This package is organized by feature modules (students, assignments, calls, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
