"""Point selection rules.

Every group of rows (e.g. a block of E space) is represented by the point
or points chosen by one of these rules: a random draw, or the point(s)
closest to the group centroid in environmental or geographic space.
"""

import logging

import numpy as np
import pandas as pd

from survey_design.sampling.base import PointSelectionStrategy
from survey_design.sampling.errors import InvalidColumnError
from survey_design.sampling.types import PointSampleInputs, SelectPoint
from survey_design.scripts.centroids import closest_to_centroid
from survey_design.scripts.groups import group_positions
from survey_design.scripts.parameter import (
    geo_columns,
    latitude_column,
    longitude_column,
)

logger = logging.getLogger("survey.sampling.point")


class RandomPointStrategy(PointSelectionStrategy):
    """Draw points at random inside each group.

    Up to ``n`` rows are drawn without replacement; duplicated rows in the
    draw collapse to one.
    """

    @property
    def select_point(self) -> SelectPoint:
        return SelectPoint.RANDOM

    @property
    def display_name(self) -> str:
        return "Random point"

    def sample(self, inputs: PointSampleInputs) -> pd.DataFrame:
        """Draw up to n rows per group."""
        data = inputs.data
        rng = np.random.default_rng(inputs.seed)

        parts = []
        for positions in group_positions(data, inputs.group_col).values():
            size = min(inputs.n, len(positions))
            picked = rng.choice(positions, size=size, replace=False)
            parts.append(data.iloc[picked].drop_duplicates())

        logger.debug(
            f"Random draw of up to {inputs.n} point(s) in {len(parts)} group(s)"
        )
        if not parts:
            return data.iloc[0:0]
        return pd.concat(parts)


class ECentroidPointStrategy(PointSelectionStrategy):
    """Points closest to the group centroid in environmental space."""

    @property
    def select_point(self) -> SelectPoint:
        return SelectPoint.E_CENTROID

    @property
    def display_name(self) -> str:
        return "Closest to E centroid"

    def sample(self, inputs: PointSampleInputs) -> pd.DataFrame:
        return closest_to_centroid(
            inputs.data,
            inputs.variable_1,
            inputs.variable_2,
            space="E",
            n=inputs.n,
            group_col=inputs.group_col,
        )


class GCentroidPointStrategy(PointSelectionStrategy):
    """Points closest to the group centroid in geographic space."""

    @property
    def select_point(self) -> SelectPoint:
        return SelectPoint.G_CENTROID

    @property
    def display_name(self) -> str:
        return "Closest to G centroid"

    def validate_inputs(self, inputs: PointSampleInputs) -> None:
        """Validate inputs, including the geographic columns."""
        self._validate_common_inputs(inputs)
        for column in geo_columns:
            if column not in inputs.data.columns:
                raise InvalidColumnError(column)

    def sample(self, inputs: PointSampleInputs) -> pd.DataFrame:
        return closest_to_centroid(
            inputs.data,
            longitude_column,
            latitude_column,
            space="G",
            n=inputs.n,
            group_col=inputs.group_col,
        )
