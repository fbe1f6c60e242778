"""Sliced point-set optimization primitives.

This package provides stratified projection directions for slicing N-D
sample sets onto 1-D lines, a toroidal (wrap-around) metric on the unit
domain, uniform ball/cube samplers and an exporter that writes a tiled
sample set as a static lookup table.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
