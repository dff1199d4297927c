"""Command-line entry points.

Run them as modules from the repository root, e.g. `python -m scripts.generate_parlays`.
"""
