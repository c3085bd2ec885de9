"""Sampling service for point and block selection.

This module holds the registry of selection strategies and the entry
points that validate inputs and dispatch to the right strategy.
"""

import logging
from typing import Dict, Optional, Type

import pandas as pd

from survey_design.model.master import MasterMatrix
from survey_design.sampling.base import BlockSelectionStrategy, PointSelectionStrategy
from survey_design.sampling.block import RandomBlockStrategy, UniformBlockStrategy
from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
    MissingPreconditionError,
)
from survey_design.sampling.point import (
    ECentroidPointStrategy,
    GCentroidPointStrategy,
    RandomPointStrategy,
)
from survey_design.sampling.types import (
    BlockSampleInputs,
    PointSampleInputs,
    SelectionType,
    SelectPoint,
)
from survey_design.scripts.parameter import (
    block_column,
    default_replicates,
    default_seed,
    selection_column,
)

logger = logging.getLogger("survey.sampling.service")

# Registry of available strategies
_POINT_REGISTRY: Dict[SelectPoint, Type[PointSelectionStrategy]] = {
    SelectPoint.RANDOM: RandomPointStrategy,
    SelectPoint.E_CENTROID: ECentroidPointStrategy,
    SelectPoint.G_CENTROID: GCentroidPointStrategy,
}

_BLOCK_REGISTRY: Dict[SelectionType, Type[BlockSelectionStrategy]] = {
    SelectionType.UNIFORM: UniformBlockStrategy,
    SelectionType.RANDOM: RandomBlockStrategy,
}

# Cached strategy instances
_point_instances: Dict[SelectPoint, PointSelectionStrategy] = {}
_block_instances: Dict[SelectionType, BlockSelectionStrategy] = {}


def get_point_strategy(select_point) -> PointSelectionStrategy:
    """Get the point selection strategy for a rule.

    Args:
        select_point: SelectPoint member or its string value

    Returns:
        The corresponding PointSelectionStrategy instance

    Raises:
        InvalidOptionError: If the rule is not supported
    """
    rule = SelectPoint.from_string(select_point)

    # Use cached instance if available
    if rule not in _point_instances:
        _point_instances[rule] = _POINT_REGISTRY[rule]()

    return _point_instances[rule]


def get_block_strategy(selection_type) -> BlockSelectionStrategy:
    """Get the block selection strategy for a selection type.

    Args:
        selection_type: SelectionType member or its string value

    Returns:
        The corresponding BlockSelectionStrategy instance

    Raises:
        InvalidOptionError: If the selection type is not supported
    """
    stype = SelectionType.from_string(selection_type)

    if stype not in _block_instances:
        _block_instances[stype] = _BLOCK_REGISTRY[stype]()

    return _block_instances[stype]


def point_sample(
    data: pd.DataFrame,
    variable_1: str,
    variable_2: str,
    n: int = 1,
    select_point="E_centroid",
    group_col: Optional[str] = None,
    seed: int = default_seed,
) -> pd.DataFrame:
    """Sample points from a 2D environmental space.

    Args:
        data: DataFrame with Longitude, Latitude and the two variables
        variable_1: Variable on the x-axis
        variable_2: Variable on the y-axis
        n: Number of points per group
        select_point: "random", "E_centroid" or "G_centroid"
        group_col: Column with the ids of sets of points sampled
            independently; None means a single set
        seed: Seed for "random"

    Returns:
        DataFrame with up to n rows per group, groups in encounter order

    Raises:
        MissingArgumentError: If data or a variable is not defined
        InvalidColumnError: If a variable is not a column of data
        InvalidOptionError: If select_point is not a known rule
    """
    inputs = PointSampleInputs(
        data=data,
        variable_1=variable_1,
        variable_2=variable_2,
        n=n,
        select_point=SelectPoint.from_string(select_point),
        group_col=group_col,
        seed=seed,
    )
    strategy = get_point_strategy(inputs.select_point)
    strategy.validate_inputs(inputs)
    sampled = strategy.sample(inputs)

    logger.debug(
        f"{strategy.display_name} selection: {len(sampled)} of "
        f"{len(data)} points"
    )
    return sampled


def _validate_block_inputs(inputs: BlockSampleInputs) -> None:
    master = inputs.master
    if master is None:
        raise MissingArgumentError("master")
    if not isinstance(master, MasterMatrix):
        raise InvalidArgumentError(
            "Object defined in 'master' must be a MasterMatrix or MasterSelection."
        )
    if block_column not in master.data_matrix.columns:
        raise MissingPreconditionError(
            "Blocks are not defined in data_matrix, see function 'make_blocks'."
        )
    if master.block_arguments is None:
        raise MissingPreconditionError(
            "Variables used to build blocks are not recorded in 'block_arguments', "
            "see function 'make_blocks'."
        )
    for variable in inputs.variables:
        if variable not in master.data_matrix.columns:
            raise InvalidColumnError(variable, "master.data_matrix")
    if inputs.expected_blocks is None:
        raise MissingArgumentError("expected_blocks")

    n_blocks = master.data_matrix[block_column].nunique()
    if not 1 <= inputs.expected_blocks <= n_blocks:
        raise InvalidArgumentError(
            f"'expected_blocks' must be between 1 and the number of blocks ({n_blocks})"
        )
    if inputs.replicates < 1:
        raise InvalidArgumentError("'replicates' must be at least 1")


def block_sample(
    master: MasterMatrix,
    expected_blocks: Optional[int] = None,
    selection_type="uniform",
    replicates: int = default_replicates,
    seed: int = default_seed,
) -> MasterMatrix:
    """Select blocks of environmental space for further analysis.

    Adds the column "Selected_blocks" to ``master.data_matrix``: 1 for rows
    in a selected block, 0 otherwise. Existing columns are left untouched.

    Args:
        master: MasterMatrix or MasterSelection with blocks defined
        expected_blocks: Number of blocks to select
        selection_type: "uniform" or "random"
        replicates: Thinning replicates used by "uniform"
        seed: Initial seed

    Returns:
        The same master object, with the selection column added

    Raises:
        MissingArgumentError: If master or expected_blocks is not defined
        MissingPreconditionError: If blocks or their variables are missing
        InvalidColumnError: If the block variables are not columns
        InvalidOptionError: If selection_type is not valid
    """
    inputs = BlockSampleInputs(
        master=master,
        expected_blocks=expected_blocks,
        replicates=replicates,
        seed=seed,
    )
    _validate_block_inputs(inputs)
    inputs.selection_type = SelectionType.from_string(selection_type)

    strategy = get_block_strategy(inputs.selection_type)
    selected = strategy.select(inputs)
    logger.info(
        f"{strategy.display_name} block selection: {len(selected)} of "
        f"{master.data_matrix[block_column].nunique()} blocks"
    )

    data = master.data_matrix
    data[selection_column] = data[block_column].isin(selected).astype(int)
    return master
