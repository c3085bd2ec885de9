"""Partition of a 2D environmental space into blocks."""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from survey_design.model.master import BlockArguments, MasterMatrix
from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
)
from survey_design.sampling.types import BlockType
from survey_design.scripts.parameter import block_column

logger = logging.getLogger("survey.scripts.blocks")


def _bin(values: np.ndarray, edges: np.ndarray) -> np.ndarray:
    """Bin index (0..len(edges)-2) of each value; the top edge is closed."""
    return np.searchsorted(edges[1:-1], values, side="right")


def _equal_area(x: np.ndarray, y: np.ndarray, n_cols: int, n_rows: int):
    cols = _bin(x, np.linspace(x.min(), x.max(), n_cols + 1))
    rows = _bin(y, np.linspace(y.min(), y.max(), n_rows + 1))
    return cols, rows


def _equal_points(x: np.ndarray, y: np.ndarray, n_cols: int, n_rows: int):
    cols = _bin(x, np.quantile(x, np.linspace(0, 1, n_cols + 1)))
    rows = np.zeros(len(y), dtype=int)
    for col in np.unique(cols):
        inside = cols == col
        edges = np.quantile(y[inside], np.linspace(0, 1, n_rows + 1))
        rows[inside] = _bin(y[inside], edges)
    return cols, rows


def make_blocks(
    master: MasterMatrix,
    variable_1: str,
    variable_2: str,
    n_cols: int,
    n_rows: Optional[int] = None,
    block_type="equal_area",
) -> MasterMatrix:
    """Assign every row of the master matrix to a block of E space.

    "equal_area" divides the range of each variable into equal intervals.
    "equal_points" uses quantiles so blocks hold similar numbers of rows:
    columns are quantiles of ``variable_1`` and, inside each column, rows
    are quantiles of ``variable_2``.

    Block ids are integers ``col * n_rows + row + 1``.

    Args:
        master: MasterMatrix or MasterSelection
        variable_1: Variable on the x-axis
        variable_2: Variable on the y-axis
        n_cols: Number of columns
        n_rows: Number of rows (defaults to n_cols)
        block_type: "equal_area" or "equal_points"

    Returns:
        Copy of master (same variant) with a Block column and the
        partition parameters recorded in block_arguments
    """
    if master is None:
        raise MissingArgumentError("master")
    if variable_1 is None:
        raise MissingArgumentError("variable_1")
    if variable_2 is None:
        raise MissingArgumentError("variable_2")
    if n_cols is None:
        raise MissingArgumentError("n_cols")

    data = master.data_matrix
    for variable in (variable_1, variable_2):
        if variable not in data.columns:
            raise InvalidColumnError(variable, "master.data_matrix")

    n_rows = n_cols if n_rows is None else n_rows
    if n_cols < 1 or n_rows < 1:
        raise InvalidArgumentError("'n_cols' and 'n_rows' must be at least 1")
    btype = BlockType.from_string(block_type)

    x = data[variable_1].to_numpy(dtype=float)
    y = data[variable_2].to_numpy(dtype=float)
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        raise InvalidArgumentError(
            f"'{variable_1}' and '{variable_2}' must not contain missing values"
        )

    if btype is BlockType.EQUAL_AREA:
        cols, rows = _equal_area(x, y, n_cols, n_rows)
    else:
        cols, rows = _equal_points(x, y, n_cols, n_rows)

    blocks = cols * n_rows + rows + 1
    logger.debug(
        f"{btype.value} blocks: {len(np.unique(blocks))} non-empty of "
        f"{n_cols * n_rows}"
    )

    return master.with_data(
        data.assign(**{block_column: pd.Series(blocks, index=data.index)}),
        block_arguments=BlockArguments(
            variable_1=variable_1,
            variable_2=variable_2,
            n_cols=n_cols,
            n_rows=n_rows,
            block_type=btype.value,
        ),
    )
