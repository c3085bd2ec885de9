"""Distance helpers for geographic (G) and environmental (E) space.

Geographic distances are great-circle distances on the WGS84 ellipsoid,
in metres. Environmental distances are plain Euclidean distances.
"""

import logging
from typing import Dict, Optional

import geopandas as gpd
import numpy as np
import pandas as pd
from pyproj import Geod
from scipy.spatial.distance import pdist, squareform

from survey_design.sampling.errors import InvalidColumnError
from survey_design.sampling.types import Space
from survey_design.scripts.parameter import (
    ellipsoid,
    geo_columns,
    latitude_column,
    longitude_column,
    target_crs_str,
)

logger = logging.getLogger("survey.scripts.geodesic")

_GEOD = Geod(ellps=ellipsoid)


def geodesic_condensed(lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
    """Pairwise geodesic distances in condensed (upper triangle) form.

    The order matches ``scipy.spatial.distance.pdist`` so the result can be
    passed straight to ``scipy.cluster.hierarchy.linkage``.
    """
    lon = np.asarray(lon, dtype=float)
    lat = np.asarray(lat, dtype=float)
    n = len(lon)
    if n < 2:
        return np.empty(0, dtype=float)

    i, j = np.triu_indices(n, k=1)
    _, _, dist = _GEOD.inv(lon[i], lat[i], lon[j], lat[j])
    return np.abs(np.asarray(dist, dtype=float))


def geodesic_to_point(
    lon: np.ndarray, lat: np.ndarray, lon0: float, lat0: float
) -> np.ndarray:
    """Geodesic distance in metres from each point to (lon0, lat0)."""
    lon = np.asarray(lon, dtype=float)
    lat = np.asarray(lat, dtype=float)
    if len(lon) == 0:
        return np.empty(0, dtype=float)

    _, _, dist = _GEOD.inv(
        np.full(lon.shape, lon0), np.full(lat.shape, lat0), lon, lat
    )
    return np.abs(np.asarray(dist, dtype=float))


def pairwise_distances(coords: np.ndarray, space: Space) -> np.ndarray:
    """Condensed pairwise distances for an (n, 2) array of x/y coordinates.

    In G space the columns are taken as longitude and latitude.
    """
    coords = np.asarray(coords, dtype=float)
    if space is Space.G:
        return geodesic_condensed(coords[:, 0], coords[:, 1])
    if len(coords) < 2:
        return np.empty(0, dtype=float)
    return pdist(coords, metric="euclidean")


def distance_matrix(coords: np.ndarray, space: Space) -> np.ndarray:
    """Square pairwise distance matrix (zeros on the diagonal)."""
    coords = np.asarray(coords, dtype=float)
    if len(coords) < 2:
        return np.zeros((len(coords), len(coords)), dtype=float)
    return squareform(pairwise_distances(coords, space))


def distances_to_point(coords: np.ndarray, point, space: Space) -> np.ndarray:
    """Distance of every row of ``coords`` to a single point."""
    coords = np.asarray(coords, dtype=float)
    if space is Space.G:
        return geodesic_to_point(coords[:, 0], coords[:, 1], point[0], point[1])
    return np.sqrt(((coords - np.asarray(point, dtype=float)) ** 2).sum(axis=1))


def geographic_distances(
    data: pd.DataFrame, group_col: Optional[str] = None
) -> Dict[object, np.ndarray]:
    """Pairwise geographic distances among the points of each group.

    Args:
        data: DataFrame with Longitude and Latitude columns
        group_col: Column identifying groups (e.g. "Block"). If None, the
            whole table is one group keyed by None.

    Returns:
        Dictionary mapping each group key, in encounter order, to the
        condensed vector of pairwise distances in metres
    """
    for column in geo_columns:
        if column not in data.columns:
            raise InvalidColumnError(column)
    if group_col is not None and group_col not in data.columns:
        raise InvalidColumnError(group_col)

    if group_col is None:
        return {
            None: geodesic_condensed(
                data[longitude_column].to_numpy(), data[latitude_column].to_numpy()
            )
        }

    distances = {}
    for key, group in data.groupby(group_col, sort=False):
        distances[key] = geodesic_condensed(
            group[longitude_column].to_numpy(), group[latitude_column].to_numpy()
        )
    logger.debug(f"Computed geographic distances for {len(distances)} groups")
    return distances


def sites_to_geodataframe(sites: pd.DataFrame) -> gpd.GeoDataFrame:
    """Wrap selected sites in a GeoDataFrame with point geometry.

    Args:
        sites: DataFrame with Longitude and Latitude columns

    Returns:
        GeoDataFrame in EPSG:4326 keeping all input columns
    """
    for column in geo_columns:
        if column not in sites.columns:
            raise InvalidColumnError(column, "sites")

    return gpd.GeoDataFrame(
        sites.copy(),
        geometry=gpd.points_from_xy(sites[longitude_column], sites[latitude_column]),
        crs=target_crs_str,
    )
