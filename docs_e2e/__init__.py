"""
Docs E2E suite package.

Kept importable so that:
  - tests import page objects and framework modules by absolute path
  - `run_tests.py` and CI jobs can resolve test locations
"""
