"""Master data structures shared by the selection routines.

A master matrix is the table of grid cells (rows) with their geographic
position and environmental values. The block partition parameters travel
with it as a companion record instead of being attached to the table.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional

import pandas as pd

Selections = Optional[Dict[str, pd.DataFrame]]


@dataclass
class BlockArguments:
    """Parameters used to build the block partition of E space."""

    variable_1: str
    variable_2: str
    n_cols: int
    n_rows: int
    block_type: str


@dataclass
class MasterMatrix:
    """Grid cells of the study region and their environmental values."""

    data_matrix: pd.DataFrame
    block_arguments: Optional[BlockArguments] = None
    preselected_sites: Optional[pd.DataFrame] = None

    def with_data(self, data_matrix: pd.DataFrame, **changes) -> "MasterMatrix":
        """Return a copy of the same variant holding a new data_matrix."""
        return replace(self, data_matrix=data_matrix, **changes)


@dataclass
class MasterSelection(MasterMatrix):
    """Master matrix plus the sets of sites selected from it."""

    selected_sites_random: Selections = None
    selected_sites_G: Selections = None
    selected_sites_E: Selections = None
    selected_sites_EG: Selections = None

    @classmethod
    def from_master(cls, master: MasterMatrix, **selections) -> "MasterSelection":
        """Build a selection from any master, keeping existing selections."""
        previous = {}
        if isinstance(master, MasterSelection):
            previous = {
                "selected_sites_random": master.selected_sites_random,
                "selected_sites_G": master.selected_sites_G,
                "selected_sites_E": master.selected_sites_E,
                "selected_sites_EG": master.selected_sites_EG,
            }
        previous.update(selections)
        return cls(
            data_matrix=master.data_matrix,
            block_arguments=master.block_arguments,
            preselected_sites=master.preselected_sites,
            **previous,
        )


__all__ = ["BlockArguments", "MasterMatrix", "MasterSelection"]
