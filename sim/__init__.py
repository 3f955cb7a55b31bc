"""Headless runners for the outlier simulation."""
