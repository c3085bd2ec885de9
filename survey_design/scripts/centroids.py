"""Selection of the points closest to the centroid of a set of points."""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
)
from survey_design.sampling.types import Space
from survey_design.scripts.geodesic import distances_to_point
from survey_design.scripts.groups import group_positions

logger = logging.getLogger("survey.scripts.centroids")


def closest_to_centroid(
    data: pd.DataFrame,
    x_column: str,
    y_column: str,
    space,
    n: int = 1,
    group_col: Optional[str] = None,
) -> pd.DataFrame:
    """Detect the ``n`` points closest to the centroid of each group.

    The centroid is the arithmetic mean of the x and y columns. Distances
    are Euclidean in E space and geodesic in G space. Ties are resolved by
    row order, and the chosen rows keep their original order. Groups with
    fewer than ``n`` rows are returned whole.

    Args:
        data: DataFrame with the coordinate columns
        x_column: Name of the x-axis column
        y_column: Name of the y-axis column
        space: "E" or "G"
        n: Number of points to keep per group
        group_col: Column identifying groups; None means a single group

    Returns:
        DataFrame with the selected rows of every group, groups in
        encounter order, original index preserved
    """
    if data is None:
        raise MissingArgumentError("data")
    for column in (x_column, y_column):
        if column not in data.columns:
            raise InvalidColumnError(column)
    space = Space.from_string(space)
    if n < 1:
        raise InvalidArgumentError("'n' must be at least 1")

    parts = []
    for positions in group_positions(data, group_col).values():
        group = data.iloc[positions]
        coords = group[[x_column, y_column]].to_numpy(dtype=float)
        centroid = coords.mean(axis=0)

        dist = distances_to_point(coords, centroid, space)
        chosen = np.sort(np.argsort(dist, kind="stable")[:n])
        parts.append(group.iloc[chosen])

    logger.debug(
        f"Selected up to {n} point(s) closest to the {space.value} centroid "
        f"of {len(parts)} group(s)"
    )
    if not parts:
        return data.iloc[0:0]
    return pd.concat(parts)
