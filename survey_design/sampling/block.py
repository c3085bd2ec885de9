"""Block selection strategies.

Blocks of environmental space are selected either uniformly, so that the
chosen blocks are evenly spread over the environmental plane, or at
random.
"""

import logging

import numpy as np
import pandas as pd

from survey_design.sampling.base import BlockSelectionStrategy
from survey_design.sampling.types import BlockSampleInputs, SelectionType
from survey_design.scripts.parameter import block_column
from survey_design.scripts.thinning import uniform_e_selection

logger = logging.getLogger("survey.sampling.block")


class UniformBlockStrategy(BlockSelectionStrategy):
    """Blocks whose centroids are evenly spread in E space.

    When blocks were built with "equal_points", blocks with a high density
    of points per area can be overlooked by this strategy.
    """

    @property
    def selection_type(self) -> SelectionType:
        return SelectionType.UNIFORM

    @property
    def display_name(self) -> str:
        return "Uniform in E space"

    def select(self, inputs: BlockSampleInputs) -> np.ndarray:
        variable_1, variable_2 = inputs.variables
        logger.debug(
            f"Selecting {inputs.expected_blocks} blocks uniformly in the "
            f"{variable_1}/{variable_2} plane"
        )
        selection = uniform_e_selection(
            inputs.master,
            variable_1,
            variable_2,
            selection_from="block_centroids",
            expected_points=inputs.expected_blocks,
            max_n_samplings=1,
            replicates=inputs.replicates,
            use_preselected_sites=False,
            seed=inputs.seed,
            verbose=False,
        )
        return selection.selected_sites_E["selection_1"][block_column].to_numpy()


class RandomBlockStrategy(BlockSelectionStrategy):
    """Blocks drawn at random without replacement."""

    @property
    def selection_type(self) -> SelectionType:
        return SelectionType.RANDOM

    @property
    def display_name(self) -> str:
        return "Random"

    def select(self, inputs: BlockSampleInputs) -> np.ndarray:
        blocks = pd.unique(inputs.master.data_matrix[block_column].dropna())
        logger.debug(
            f"Drawing {inputs.expected_blocks} of {len(blocks)} blocks at random"
        )
        rng = np.random.default_rng(inputs.seed)
        return rng.choice(blocks, size=inputs.expected_blocks, replace=False)
