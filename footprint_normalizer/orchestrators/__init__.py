"""Batch-level entry points.

- normalize_pipeline: run a feature batch through the stages
- statistics: descriptive counts and areas for a feature list
"""
