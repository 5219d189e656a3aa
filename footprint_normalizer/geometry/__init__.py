"""Planar ring geometry helpers shared by the normalization stages."""
