"""Building-footprint normalization for pixel-art map rendering.

Takes GeoJSON polygon features sourced from map data and turns them into
simplified, near-rectilinear outlines: Douglas-Peucker simplification,
minimum-area filtering, grid snapping and angle orthogonalization,
vertex-count reduction, and a bounding-box fallback for outlines that
stay too irregular.
"""

__version__ = "0.1.0"
