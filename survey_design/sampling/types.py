"""Type definitions for site selection.

Contains the option enums accepted by the sampling entry points and the
small data classes passed between the numeric helpers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd

from survey_design.sampling.errors import InvalidOptionError


class _Option(Enum):
    """Enum whose members can be built from their string value."""

    @classmethod
    def from_string(cls, value, argument: Optional[str] = None):
        """Convert string (or member) to enum member."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
            for alias, member in cls._aliases().items():
                if alias == value.lower():
                    return member
        raise InvalidOptionError(
            argument or cls._argument_name(), value, [m.value for m in cls]
        )

    @classmethod
    def _aliases(cls):
        return {}

    @classmethod
    def _argument_name(cls) -> str:
        return cls.__name__


class Space(_Option):
    """Space in which distances are measured."""

    E = "E"
    G = "G"

    @classmethod
    def _argument_name(cls) -> str:
        return "space"


class ClusterMethod(_Option):
    """Clustering algorithms available to find_clusters."""

    HIERARCHICAL = "hierarchical"
    KMEANS = "kmeans"

    @classmethod
    def _aliases(cls):
        return {"k-means": cls.KMEANS}

    @classmethod
    def _argument_name(cls) -> str:
        return "cluster_method"


class SelectPoint(_Option):
    """Rule used to pick the representative point(s) of a group."""

    RANDOM = "random"
    E_CENTROID = "E_centroid"
    G_CENTROID = "G_centroid"

    @classmethod
    def _argument_name(cls) -> str:
        return "select_point"


class SelectionType(_Option):
    """Block selection strategies."""

    UNIFORM = "uniform"
    RANDOM = "random"

    @classmethod
    def _argument_name(cls) -> str:
        return "selection_type"


class BlockType(_Option):
    """How the environmental plane is divided into blocks."""

    EQUAL_AREA = "equal_area"
    EQUAL_POINTS = "equal_points"

    @classmethod
    def _argument_name(cls) -> str:
        return "block_type"


class SelectionFrom(_Option):
    """Candidate points for uniform selection in E space."""

    ALL_POINTS = "all_points"
    BLOCK_CENTROIDS = "block_centroids"

    @classmethod
    def _argument_name(cls) -> str:
        return "selection_from"


@dataclass
class DensityEstimate:
    """Kernel density sampled on a regular grid.

    ``x`` is strictly increasing and has the same length as ``y``.
    """

    x: np.ndarray
    y: np.ndarray
    bandwidth: float = float("nan")
    n_obs: int = 0

    def __len__(self) -> int:
        return len(self.y)


@dataclass
class PointSampleInputs:
    """Input parameters for selecting representative points per group."""

    data: pd.DataFrame
    variable_1: str
    variable_2: str
    n: int = 1
    select_point: SelectPoint = SelectPoint.E_CENTROID
    group_col: Optional[str] = None
    seed: int = 1


@dataclass
class BlockSampleInputs:
    """Input parameters for selecting a subset of blocks."""

    master: Any
    expected_blocks: int
    selection_type: SelectionType = SelectionType.UNIFORM
    replicates: int = 10
    seed: int = 1

    @property
    def variables(self) -> Tuple[str, str]:
        """Variables the block partition was built from."""
        args = self.master.block_arguments
        return args.variable_1, args.variable_2
