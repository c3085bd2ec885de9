"""Point thinning and uniform selection of sites in environmental space.

Thinning removes points that are closer than a given distance to other
points until none are left too close. Uniform selection searches for the
thinning distance that leaves the requested number of points, which
spreads the selected sites evenly over the environmental plane.
"""

import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from survey_design.model.master import MasterMatrix, MasterSelection
from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
    MissingPreconditionError,
)
from survey_design.sampling.types import SelectionFrom, Space
from survey_design.scripts.centroids import closest_to_centroid
from survey_design.scripts.geodesic import distance_matrix
from survey_design.scripts.parameter import (
    block_column,
    default_max_iterations,
    default_replicates,
    default_seed,
)

logger = logging.getLogger("survey.scripts.thinning")


def _thin_once(close: np.ndarray, keep: np.ndarray, rng: np.random.Generator):
    """Drop random points among the most crowded until no pair is close."""
    alive = np.ones(len(close), dtype=bool)
    counts = close.sum(axis=1)

    while True:
        removable = alive & ~keep & (counts > 0)
        if not removable.any():
            break
        top = counts[removable].max()
        drop = rng.choice(np.flatnonzero(removable & (counts == top)))
        alive[drop] = False
        counts = counts - close[drop]
        counts[drop] = 0

    return np.flatnonzero(alive)


def _thinned_sets(
    dist: np.ndarray,
    thinning_distance: float,
    keep: np.ndarray,
    replicates: int,
    seed: int,
) -> List[np.ndarray]:
    """Distinct replicate results that retain the most points."""
    close = dist < thinning_distance
    np.fill_diagonal(close, False)
    close = close.astype(int)

    results = [
        _thin_once(close, keep, np.random.default_rng(seed + r))
        for r in range(replicates)
    ]
    most = max(len(r) for r in results)

    unique, seen = [], set()
    for result in results:
        signature = tuple(result)
        if len(result) == most and signature not in seen:
            seen.add(signature)
            unique.append(result)
    return unique


def point_thinning(
    data: pd.DataFrame,
    x_column: str,
    y_column: str,
    space,
    thinning_distance: float,
    max_n_samplings: int = 1,
    replicates: int = default_replicates,
    seed: int = default_seed,
    keep: Optional[np.ndarray] = None,
) -> List[pd.DataFrame]:
    """Thin points so that none is closer than ``thinning_distance``.

    Args:
        data: DataFrame with the coordinate columns
        x_column: Name of the x-axis column (Longitude in G space)
        y_column: Name of the y-axis column (Latitude in G space)
        space: "E" (Euclidean) or "G" (geodesic metres)
        thinning_distance: Minimum distance allowed between points
        max_n_samplings: Maximum number of distinct thinned sets returned
        replicates: Number of random thinning replicates; replicate r uses
            seed + r
        seed: Initial seed
        keep: Optional boolean mask of rows that are never removed

    Returns:
        List of thinned DataFrames, all with the largest number of points
        retained among replicates
    """
    if data is None:
        raise MissingArgumentError("data")
    if thinning_distance is None:
        raise MissingArgumentError("thinning_distance")
    for column in (x_column, y_column):
        if column not in data.columns:
            raise InvalidColumnError(column)
    if replicates < 1 or max_n_samplings < 1:
        raise InvalidArgumentError(
            "'replicates' and 'max_n_samplings' must be at least 1"
        )

    space = Space.from_string(space)
    keep = np.zeros(len(data), dtype=bool) if keep is None else np.asarray(keep, bool)
    dist = distance_matrix(data[[x_column, y_column]].to_numpy(dtype=float), space)

    sets = _thinned_sets(dist, thinning_distance, keep, replicates, seed)
    return [data.iloc[idx] for idx in sets[:max_n_samplings]]


def _trim_closest(
    idx: np.ndarray, dist: np.ndarray, expected: int, keep: np.ndarray
) -> np.ndarray:
    """Remove the point with the nearest neighbour until ``expected`` remain."""
    idx = list(idx)
    while len(idx) > expected:
        sub = dist[np.ix_(idx, idx)].copy()
        np.fill_diagonal(sub, np.inf)
        nearest = sub.min(axis=1)
        nearest[keep[idx]] = np.inf
        del idx[int(np.argmin(nearest))]
    return np.asarray(idx, dtype=int)


def uniform_e_selection(
    master: MasterMatrix,
    variable_1: str,
    variable_2: str,
    selection_from="all_points",
    expected_points: Optional[int] = None,
    max_n_samplings: int = 1,
    replicates: int = default_replicates,
    max_iterations: int = default_max_iterations,
    use_preselected_sites: bool = True,
    seed: int = default_seed,
    verbose: bool = True,
) -> MasterSelection:
    """Select sites spread uniformly in environmental space.

    The thinning distance is searched by bisection between 0 and the
    largest distance among candidates. If no distance leaves exactly
    ``expected_points`` points, the smallest thinned set above the target
    is reduced by dropping the points with the closest neighbours.

    Args:
        master: MasterMatrix or MasterSelection
        variable_1: Environmental variable used as x-axis
        variable_2: Environmental variable used as y-axis
        selection_from: "all_points" or "block_centroids" (the point
            closest to the E centroid of every block)
        expected_points: Number of sites to select
        max_n_samplings: Maximum number of alternative selections
        replicates: Thinning replicates per tested distance
        max_iterations: Maximum number of distances tested
        use_preselected_sites: Force master.preselected_sites into the
            selection when available
        seed: Initial seed
        verbose: Report search progress at INFO level

    Returns:
        MasterSelection with selected_sites_E = {"selection_1": ..., ...}

    Raises:
        MissingArgumentError: If a mandatory argument is missing
        InvalidColumnError: If a variable is not a column of data_matrix
        MissingPreconditionError: If blocks are needed but not defined
        InvalidArgumentError: If expected_points cannot be satisfied
    """
    if master is None:
        raise MissingArgumentError("master")
    if variable_1 is None:
        raise MissingArgumentError("variable_1")
    if variable_2 is None:
        raise MissingArgumentError("variable_2")
    if expected_points is None:
        raise MissingArgumentError("expected_points")

    data = master.data_matrix
    for variable in (variable_1, variable_2):
        if variable not in data.columns:
            raise InvalidColumnError(variable, "master.data_matrix")

    source = SelectionFrom.from_string(selection_from)
    if source is SelectionFrom.BLOCK_CENTROIDS:
        if block_column not in data.columns:
            raise MissingPreconditionError(
                "Blocks are not defined in data_matrix, see function 'make_blocks'."
            )
        candidates = closest_to_centroid(
            data, variable_1, variable_2, "E", n=1, group_col=block_column
        )
    else:
        candidates = data

    n_pre = 0
    if use_preselected_sites and master.preselected_sites is not None:
        pre = master.preselected_sites
        for variable in (variable_1, variable_2):
            if variable not in pre.columns:
                raise InvalidColumnError(variable, "master.preselected_sites")
        n_pre = len(pre)
        candidates = pd.concat([pre, candidates])

    n_cand = len(candidates)
    if not n_pre <= expected_points <= n_cand or expected_points < 1:
        raise InvalidArgumentError(
            f"'expected_points' must be between {max(n_pre, 1)} and the number "
            f"of candidate points ({n_cand})"
        )

    keep = np.zeros(n_cand, dtype=bool)
    keep[:n_pre] = True
    dist = distance_matrix(
        candidates[[variable_1, variable_2]].to_numpy(dtype=float), Space.E
    )
    report = logger.info if verbose else logger.debug

    if expected_points == n_cand:
        selections = [np.arange(n_cand)]
    else:
        lo, hi = 0.0, float(dist.max()) * 1.01 + 1e-12
        best_over = [np.arange(n_cand)]
        selections = None

        for iteration in range(max_iterations):
            distance = (lo + hi) / 2
            sets = _thinned_sets(dist, distance, keep, replicates, seed)
            count = len(sets[0])
            report(
                f"Iteration {iteration + 1}: thinning distance {distance:.4g} "
                f"kept {count} of {n_cand} points (target {expected_points})"
            )
            if count == expected_points:
                selections = sets
                break
            if count > expected_points:
                lo, best_over = distance, sets
            else:
                hi = distance

        if selections is None:
            report(
                f"No thinning distance gave exactly {expected_points} points; "
                "trimming closest points"
            )
            selections, seen = [], set()
            for idx in best_over:
                trimmed = _trim_closest(idx, dist, expected_points, keep)
                if tuple(trimmed) not in seen:
                    seen.add(tuple(trimmed))
                    selections.append(trimmed)

    selected = {
        f"selection_{i + 1}": candidates.iloc[idx]
        for i, idx in enumerate(selections[:max_n_samplings])
    }
    report(f"Uniform E selection done: {len(selected)} selection(s)")
    return MasterSelection.from_master(master, selected_sites_E=selected)
