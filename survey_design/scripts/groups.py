"""Row grouping shared by every per-group routine."""

from typing import Dict, Optional

import numpy as np
import pandas as pd

from survey_design.sampling.errors import InvalidColumnError


def group_positions(
    data: pd.DataFrame, group_col: Optional[str] = None
) -> Dict[object, np.ndarray]:
    """Map each group key to the positional indices of its rows.

    Keys follow the order in which groups are first encountered and rows
    keep their original order inside each group. Without ``group_col``
    the whole table is one group keyed by None. Rows with a missing group
    identifier belong to no group.
    """
    if group_col is None:
        return {None: np.arange(len(data))}
    if group_col not in data.columns:
        raise InvalidColumnError(group_col)

    codes, uniques = pd.factorize(data[group_col])
    order = np.argsort(codes, kind="stable")
    bounds = np.searchsorted(codes[order], np.arange(len(uniques) + 1))

    return {
        key: order[bounds[k] : bounds[k + 1]] for k, key in enumerate(uniques)
    }
