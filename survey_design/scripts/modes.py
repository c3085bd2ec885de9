"""Density, mode and unimodality analysis of 1D value sets.

Used to decide whether the geographic distances among the points of a
block come from one cohesive area (one mode) or from several disjoint
areas (more than one mode).
"""

import logging
from typing import Mapping, Sequence

import diptest
import numpy as np
import pandas as pd
from scipy import stats

from survey_design.sampling.errors import InvalidArgumentError, MissingArgumentError
from survey_design.sampling.types import DensityEstimate
from survey_design.scripts.parameter import (
    block_column,
    default_mc_replicates,
    default_seed,
    density_cut,
    density_points,
)

logger = logging.getLogger("survey.scripts.modes")


def rule_of_thumb_bandwidth(values: np.ndarray) -> float:
    """Silverman's rule of thumb bandwidth for a Gaussian kernel.

    Formula: bw = 0.9 x min(sd, IQR / 1.34) x n^(-1/5)

    Falls back to sd, then to |x[0]|, then to 1 when the spread is zero.
    """
    values = np.asarray(values, dtype=float)
    hi = np.std(values, ddof=1)
    q75, q25 = np.percentile(values, [75, 25])
    lo = min(hi, (q75 - q25) / 1.34)
    if not lo:
        lo = hi or abs(values[0]) or 1.0
    return 0.9 * lo * len(values) ** -0.2


def estimate_density(
    values: Sequence[float], n_points: int = density_points, cut: float = density_cut
) -> DensityEstimate:
    """Gaussian kernel density estimate on a regular grid.

    Args:
        values: Observed values (non-finite values are ignored)
        n_points: Number of grid points
        cut: Bandwidths by which the grid extends beyond the data range

    Returns:
        DensityEstimate with strictly increasing x

    Raises:
        InvalidArgumentError: If fewer than 2 finite values are given
    """
    values = np.asarray(values, dtype=float)
    values = values[np.isfinite(values)]
    if len(values) < 2:
        raise InvalidArgumentError(
            "At least 2 finite values are needed to estimate a density"
        )

    bw = rule_of_thumb_bandwidth(values)
    grid = np.linspace(values.min() - cut * bw, values.max() + cut * bw, n_points)

    # Evaluate in chunks so large distance sets do not build a huge matrix
    dens = np.empty(n_points, dtype=float)
    chunk = max(1, 2_000_000 // len(values))
    for start in range(0, n_points, chunk):
        block = grid[start : start + chunk]
        dens[start : start + chunk] = stats.norm.pdf(
            (block[:, None] - values[None, :]) / bw
        ).sum(axis=1)
    dens /= len(values) * bw

    return DensityEstimate(x=grid, y=dens, bandwidth=bw, n_obs=len(values))


def find_modes(density: DensityEstimate) -> pd.DataFrame:
    """Find modes of a distribution from its density estimate.

    A mode is an interior grid point whose density is strictly greater
    than both neighbours. Plateaus and the grid ends are never modes.

    Args:
        density: DensityEstimate (or any object with x and y sequences)

    Returns:
        DataFrame with columns mode and density. If no mode exists (the
        distribution is monotonic) a single row of NaN is returned.
    """
    if density is None:
        raise MissingArgumentError("density")

    y = np.asarray(density.y, dtype=float)
    x = np.asarray(density.x, dtype=float)

    if len(y) < 3:
        idx = np.empty(0, dtype=int)
    else:
        inner = y[1:-1]
        idx = np.flatnonzero((inner > y[:-2]) & (inner > y[2:])) + 1

    if len(idx) == 0:
        logger.debug("This is a monotonic distribution. Returning NaN.")
        return pd.DataFrame({"mode": [np.nan], "density": [np.nan]})

    return pd.DataFrame({"mode": x[idx], "density": y[idx]})


def count_modes(modes: pd.DataFrame) -> int:
    """Number of real modes in a find_modes result (0 for the NaN row)."""
    return int(modes["mode"].notna().sum())


def unimodal_test(
    values: Mapping[object, Sequence[float]],
    mc_replicates: int = default_mc_replicates,
    seed: int = default_seed,
) -> pd.DataFrame:
    """Unimodality test based on Hartigan's dip statistic D.

    The p-value is estimated with ``mc_replicates`` Monte Carlo samples
    from the uniform distribution.

    Args:
        values: Mapping of key (e.g. block id) to a set of values
        mc_replicates: Number of Monte Carlo replicates for the p-value
        seed: Seed for the Monte Carlo simulation

    Returns:
        DataFrame with columns Block, D and p_value, one row per key in
        mapping order. Sets with 2 or fewer values get NaN for both.
    """
    if values is None:
        raise MissingArgumentError("values")
    if mc_replicates < 1:
        raise InvalidArgumentError("'mc_replicates' must be at least 1")

    rows = []
    for key, vals in values.items():
        vals = np.asarray(vals, dtype=float)

        if len(vals) <= 2:
            logger.debug(f"Set {key} has {len(vals)} values; skipping dip test")
            rows.append({block_column: key, "D": np.nan, "p_value": np.nan})
            continue

        dip, pval = diptest.diptest(
            vals, boot_pval=True, n_boot=mc_replicates, seed=seed
        )
        rows.append({block_column: key, "D": float(dip), "p_value": float(pval)})

    return pd.DataFrame(rows, columns=[block_column, "D", "p_value"])
