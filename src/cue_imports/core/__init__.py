"""
Core Logic Package.

Contains the CUE front-end (`cue`), the import resolution passes
(`import_fixer`) and the per-file pipeline (`engine`).
"""
