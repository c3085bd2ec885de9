"""Detection of clusters in 2D geographic or environmental space."""

import logging
from typing import Optional

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import fcluster, linkage
from sklearn.cluster import KMeans

from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
)
from survey_design.sampling.types import ClusterMethod, Space
from survey_design.scripts.geodesic import pairwise_distances
from survey_design.scripts.parameter import cluster_column, default_seed, kmeans_n_init

logger = logging.getLogger("survey.scripts.clustering")


def relabel_by_appearance(labels: np.ndarray) -> np.ndarray:
    """Renumber labels 1..k in order of first appearance."""
    labels = np.asarray(labels)
    _, first = np.unique(labels, return_index=True)
    order = labels[np.sort(first)]
    mapping = {label: i + 1 for i, label in enumerate(order)}
    return np.array([mapping[label] for label in labels], dtype=int)


def hierarchical_clusters(
    coords: np.ndarray, space: Space, split_distance: float
) -> np.ndarray:
    """Complete linkage clustering cut at height ``split_distance``.

    Distances are Euclidean in E space and geodesic metres in G space.
    """
    if len(coords) < 2:
        return np.ones(len(coords), dtype=int)

    tree = linkage(pairwise_distances(coords, space), method="complete")
    labels = fcluster(tree, t=split_distance, criterion="distance")
    return relabel_by_appearance(labels)


def kmeans_clusters(
    coords: np.ndarray, n_clusters: int, seed: int = default_seed
) -> np.ndarray:
    """K-means partition of the points into ``n_clusters`` groups."""
    model = KMeans(n_clusters=n_clusters, n_init=kmeans_n_init, random_state=seed)
    labels = relabel_by_appearance(model.fit_predict(coords))

    found = len(np.unique(labels))
    if found < n_clusters:
        logger.warning(
            f"K-means produced {found} non-empty clusters out of {n_clusters} "
            "requested (duplicated coordinates)"
        )
    return labels


def find_clusters(
    data: pd.DataFrame,
    x_column: str,
    y_column: str,
    space,
    cluster_method="hierarchical",
    n_clusters: Optional[int] = None,
    split_distance: Optional[float] = None,
    seed: int = default_seed,
) -> pd.DataFrame:
    """Find clusters of points in two dimensions.

    The k-means method tends to perform better when data are grouped
    spherically and clusters are of similar size. Hierarchical clustering
    is slower but does not need the number of clusters in advance.

    Args:
        data: DataFrame with at least the two coordinate columns
        x_column: Name of the x-axis column (Longitude in G space)
        y_column: Name of the y-axis column (Latitude in G space)
        space: "E" (Euclidean distances) or "G" (geodesic distances, metres)
        cluster_method: "hierarchical" or "kmeans"
        n_clusters: Number of clusters for "kmeans"
        split_distance: Height at which the hierarchical tree is cut, in
            metres for G space
        seed: Random state for "kmeans"

    Returns:
        Copy of data with an additional integer column "clusters"
    """
    if data is None:
        raise MissingArgumentError("data")
    if x_column is None:
        raise MissingArgumentError("x_column")
    if y_column is None:
        raise MissingArgumentError("y_column")
    for column in (x_column, y_column):
        if column not in data.columns:
            raise InvalidColumnError(column)
    if space is None:
        raise MissingArgumentError("space")

    space = Space.from_string(space)
    method = ClusterMethod.from_string(cluster_method)
    coords = data[[x_column, y_column]].to_numpy(dtype=float)

    if method is ClusterMethod.HIERARCHICAL:
        if split_distance is None:
            raise MissingArgumentError(
                "split_distance", "if 'cluster_method' = 'hierarchical'"
            )
        labels = hierarchical_clusters(coords, space, split_distance)
    else:
        if n_clusters is None:
            raise MissingArgumentError("n_clusters", "if 'cluster_method' = 'kmeans'")
        if n_clusters < 1 or n_clusters > len(data):
            raise InvalidArgumentError(
                f"'n_clusters' must be between 1 and the number of rows ({len(data)})"
            )
        labels = kmeans_clusters(coords, n_clusters, seed)

    logger.debug(
        f"{method.value} clustering in {space.value} space: "
        f"{len(np.unique(labels))} clusters from {len(data)} points"
    )
    return data.assign(**{cluster_column: labels})
