"""Normalization stages, applied per polygon in this order:

- simplify: Douglas-Peucker vertex thinning
- area_filter: drop footprints below the minimum area
- orthogonalize: grid snap, angle correction, edge forcing
- reduce_vertices: uniform decimation to the vertex budget
- complexity: bounding-box fallback for irregular outlines
"""
