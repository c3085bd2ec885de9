"""Base classes for site selection strategies.

Defines the interfaces that point and block selection strategies must
implement.
"""

from abc import ABC, abstractmethod

import numpy as np
import pandas as pd

from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    MissingArgumentError,
)
from survey_design.sampling.types import (
    BlockSampleInputs,
    PointSampleInputs,
    SelectionType,
    SelectPoint,
)


class PointSelectionStrategy(ABC):
    """Abstract base class for rules choosing representative points.

    Each rule (random, E centroid, G centroid) implements this interface.
    """

    @property
    @abstractmethod
    def select_point(self) -> SelectPoint:
        """Return the selection rule this strategy handles."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for this rule."""
        pass

    def validate_inputs(self, inputs: PointSampleInputs) -> None:
        """Validate inputs for this rule.

        Args:
            inputs: Point sampling inputs to validate

        Raises:
            SurveyDesignError: On the first problem found
        """
        self._validate_common_inputs(inputs)

    @abstractmethod
    def sample(self, inputs: PointSampleInputs) -> pd.DataFrame:
        """Select points for every group.

        Args:
            inputs: Validated point sampling inputs

        Returns:
            DataFrame with the selected rows
        """
        pass

    def _validate_common_inputs(self, inputs: PointSampleInputs) -> None:
        """Validate inputs common to all point selection rules."""
        if inputs.data is None:
            raise MissingArgumentError("data")
        if inputs.variable_1 is None:
            raise MissingArgumentError("variable_1")
        if inputs.variable_2 is None:
            raise MissingArgumentError("variable_2")

        columns = inputs.data.columns
        for variable in (inputs.variable_1, inputs.variable_2):
            if variable not in columns:
                raise InvalidColumnError(variable)
        if inputs.group_col is not None and inputs.group_col not in columns:
            raise InvalidColumnError(inputs.group_col)

        if inputs.n is None or inputs.n < 1:
            raise InvalidArgumentError("'n' must be at least 1")


class BlockSelectionStrategy(ABC):
    """Abstract base class for strategies choosing blocks of E space."""

    @property
    @abstractmethod
    def selection_type(self) -> SelectionType:
        """Return the selection type this strategy handles."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for this selection type."""
        pass

    @abstractmethod
    def select(self, inputs: BlockSampleInputs) -> np.ndarray:
        """Choose ``expected_blocks`` block ids.

        Args:
            inputs: Validated block sampling inputs

        Returns:
            Array of selected block ids
        """
        pass
