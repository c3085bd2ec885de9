"""Site selection module.

This module provides the entry points used to choose sampling sites:
representative points per group of rows, cluster-aware points for groups
that are disjoint in geography, and subsets of blocks of E space.
Each point or block selection rule is implemented as a Strategy class.

Usage:
    from survey_design.sampling import block_sample, point_sample_cluster

    master = block_sample(master, expected_blocks=10, selection_type="uniform")
    sites = point_sample_cluster(data, "PC1", "PC2", distance_list,
                                 group_col="Block")
"""

from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    InvalidOptionError,
    MissingArgumentError,
    MissingPreconditionError,
    SurveyDesignError,
)
from survey_design.sampling.types import (
    BlockType,
    ClusterMethod,
    DensityEstimate,
    SelectionFrom,
    SelectionType,
    SelectPoint,
    Space,
)
from survey_design.sampling.base import BlockSelectionStrategy, PointSelectionStrategy
from survey_design.sampling.service import (
    block_sample,
    get_block_strategy,
    get_point_strategy,
    point_sample,
)
from survey_design.sampling.cluster import point_sample_cluster

__all__ = [
    # Errors
    "SurveyDesignError",
    "MissingArgumentError",
    "InvalidColumnError",
    "InvalidOptionError",
    "MissingPreconditionError",
    "InvalidArgumentError",
    # Types
    "Space",
    "ClusterMethod",
    "SelectPoint",
    "SelectionType",
    "BlockType",
    "SelectionFrom",
    "DensityEstimate",
    # Strategies
    "PointSelectionStrategy",
    "BlockSelectionStrategy",
    "get_point_strategy",
    "get_block_strategy",
    # Entry points
    "point_sample",
    "point_sample_cluster",
    "block_sample",
]
