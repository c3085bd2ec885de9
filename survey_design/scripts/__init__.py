"""Survey design scripts package.

Contains the numeric building blocks used by the sampling entry points.
"""

from .blocks import make_blocks
from .centroids import closest_to_centroid
from .clustering import find_clusters
from .geodesic import (
    distance_matrix,
    geographic_distances,
    pairwise_distances,
    sites_to_geodataframe,
)
from .groups import group_positions
from .modes import estimate_density, find_modes, unimodal_test
from .thinning import point_thinning, uniform_e_selection

__all__ = [
    # Blocks
    "make_blocks",
    # Distances
    "pairwise_distances",
    "distance_matrix",
    "geographic_distances",
    "sites_to_geodataframe",
    # Grouping and centroids
    "group_positions",
    "closest_to_centroid",
    # Modes and clusters
    "estimate_density",
    "find_modes",
    "unimodal_test",
    "find_clusters",
    # Thinning
    "point_thinning",
    "uniform_e_selection",
]
