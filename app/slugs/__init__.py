"""Slug history engine: sequence resolution, history sync and lookup."""
