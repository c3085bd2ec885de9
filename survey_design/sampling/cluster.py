"""Point sampling for groups that can be disjoint in geography.

A block of environmental space can span several areas that are far apart
in geography. When the geographic distances among the points of a group
have more than one mode, the group is split into geographic clusters and
one representative is sampled from each of its two most numerous
clusters instead of a single representative for the whole group.
"""

import logging
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
)
from survey_design.sampling.service import point_sample
from survey_design.sampling.types import ClusterMethod, SelectPoint
from survey_design.scripts.clustering import find_clusters
from survey_design.scripts.groups import group_positions
from survey_design.scripts.modes import count_modes, estimate_density, find_modes
from survey_design.scripts.parameter import (
    cluster_column,
    default_seed,
    geo_columns,
    latitude_column,
    longitude_column,
)

logger = logging.getLogger("survey.sampling.cluster")


def _distances_for(distance_list: Mapping, key, single_group: bool) -> np.ndarray:
    """Look up the distances of a group by key, then by str(key).

    An ungrouped table takes the sole entry of a one-entry mapping whatever
    its key.
    """
    if key in distance_list:
        return np.asarray(distance_list[key], dtype=float)
    if str(key) in distance_list:
        return np.asarray(distance_list[str(key)], dtype=float)
    if single_group and len(distance_list) == 1:
        return np.asarray(next(iter(distance_list.values())), dtype=float)
    raise InvalidArgumentError(f"No distances found in 'distance_list' for {key!r}")


def _free_column(columns, base: str) -> str:
    """First of base, base_1, base_2, ... not already in columns."""
    name, suffix = base, 0
    while name in columns:
        suffix += 1
        name = f"{base}_{suffix}"
    return name


def distance_modes(distances: Sequence[float]) -> pd.DataFrame:
    """Modes of the density of a set of distances.

    Sets with fewer than 2 finite distances have no density and give the
    "no modes" result of find_modes.
    """
    distances = np.asarray(distances, dtype=float)
    if np.isfinite(distances).sum() < 2:
        return pd.DataFrame({"mode": [np.nan], "density": [np.nan]})
    return find_modes(estimate_density(distances))


def split_distance_from_modes(modes: pd.DataFrame) -> float:
    """Absolute difference between the two modes with the highest density."""
    top = modes.sort_values("density", kind="stable").tail(2)
    return float(abs(top["mode"].iloc[1] - top["mode"].iloc[0]))


def point_sample_cluster(
    data: pd.DataFrame,
    variable_1: str,
    variable_2: str,
    distance_list: Optional[Mapping] = None,
    n: int = 1,
    cluster_method="hierarchical",
    select_point="E_centroid",
    group_col: Optional[str] = None,
    seed: int = default_seed,
) -> pd.DataFrame:
    """Sample points from groups that may be disjoint in geographic space.

    For each group, the density of its geographic distances is examined.
    With one mode (or none) the group is sampled as a whole. With more
    than one mode, the two modes of highest density give the distance at
    which the group is split into geographic clusters, and points are
    sampled from the two most numerous clusters.

    Args:
        data: DataFrame with Longitude, Latitude and the two variables
        variable_1: Variable on the x-axis
        variable_2: Variable on the y-axis
        distance_list: Mapping of group id to the geographic distances
            (metres) among the points of that group, see
            ``geographic_distances``
        n: Number of points per group, or per cluster for split groups
        cluster_method: "hierarchical" or "kmeans" (two clusters)
        select_point: "random", "E_centroid" or "G_centroid"
        group_col: Column with group ids; None means a single group
        seed: Seed for random selection and k-means

    Returns:
        DataFrame with the sampled rows, groups in encounter order
    """
    if data is None:
        raise MissingArgumentError("data")
    if variable_1 is None:
        raise MissingArgumentError("variable_1")
    if variable_2 is None:
        raise MissingArgumentError("variable_2")
    for column in (variable_1, variable_2):
        if column not in data.columns:
            raise InvalidColumnError(column)
    select_point = SelectPoint.from_string(select_point)
    if distance_list is None:
        raise MissingArgumentError("distance_list")
    method = ClusterMethod.from_string(cluster_method)
    for column in geo_columns:
        if column not in data.columns:
            raise InvalidColumnError(column)

    groups = group_positions(data, group_col)
    single_group = group_col is None
    label_column = _free_column(data.columns, cluster_column)

    parts = []
    for key, positions in groups.items():
        group = data.iloc[positions]
        distances = _distances_for(distance_list, key, single_group)
        modes = distance_modes(distances)

        if count_modes(modes) > 1:
            split = split_distance_from_modes(modes)
            labels = find_clusters(
                group[list(geo_columns)],
                longitude_column,
                latitude_column,
                space="G",
                cluster_method=method,
                n_clusters=2,
                split_distance=split,
                seed=seed,
            )[cluster_column].to_numpy()
            clustered = group.assign(**{label_column: labels})

            sizes = clustered[label_column].value_counts().sort_index()
            largest = sorted(sizes.index, key=lambda label: -sizes[label])[:2]
            logger.debug(
                f"Group {key}: {count_modes(modes)} modes, split at {split:.1f} m "
                f"into {len(sizes)} clusters; sampling clusters {list(largest)}"
            )

            sampled = point_sample(
                clustered[clustered[label_column].isin(largest)],
                variable_1,
                variable_2,
                n=n,
                select_point=select_point,
                group_col=label_column,
                seed=seed,
            ).drop(columns=label_column)
        else:
            sampled = point_sample(
                group,
                variable_1,
                variable_2,
                n=n,
                select_point=select_point,
                seed=seed,
            )
        parts.append(sampled)

    if not parts:
        return data.iloc[0:0]
    return pd.concat(parts)
