"""Test package marker.

What:
  Marks ``tests`` as a package so pytest resolves ``tests/conftest.py``
  consistently for the unit and end-to-end suites.

Interfaces:
  No public interfaces are defined here.
"""
