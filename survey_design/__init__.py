# survey_design/__init__.py

from survey_design.sampling import (
    block_sample,
    point_sample,
    point_sample_cluster,
)
from survey_design.model import BlockArguments, MasterMatrix, MasterSelection
from survey_design.scripts import (
    closest_to_centroid,
    find_clusters,
    find_modes,
    geographic_distances,
    make_blocks,
    uniform_e_selection,
    unimodal_test,
)

__version__ = "0.1.0"

__all__ = [
    "BlockArguments",
    "MasterMatrix",
    "MasterSelection",
    "block_sample",
    "closest_to_centroid",
    "find_clusters",
    "find_modes",
    "geographic_distances",
    "make_blocks",
    "point_sample",
    "point_sample_cluster",
    "uniform_e_selection",
    "unimodal_test",
]
