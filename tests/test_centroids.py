import pandas as pd
import pytest

from survey_design.sampling.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    InvalidOptionError,
)
from survey_design.scripts.centroids import closest_to_centroid
from survey_design.scripts.groups import group_positions


def _points():
    return pd.DataFrame(
        {
            "x": [0.0, 1.0, 10.0, 2.0, 50.0, 51.0],
            "y": [0.0, 1.0, 10.0, 2.0, 50.0, 52.0],
            "g": ["a", "a", "a", "a", "b", "b"],
        },
        index=[10, 11, 12, 13, 14, 15],
    )


def test_group_positions_follow_encounter_order():
    data = pd.DataFrame({"g": ["b", "a", "b", "c", "a"]})

    groups = group_positions(data, "g")

    assert list(groups) == ["b", "a", "c"]
    assert list(groups["b"]) == [0, 2]
    assert list(groups["a"]) == [1, 4]
    assert list(groups["c"]) == [3]


def test_group_positions_without_column_is_one_group():
    data = pd.DataFrame({"g": [1, 2, 3]})

    groups = group_positions(data)

    assert list(groups) == [None]
    assert list(groups[None]) == [0, 1, 2]


def test_closest_point_per_group():
    result = closest_to_centroid(_points(), "x", "y", "E", n=1, group_col="g")

    # centroid of "a" is (3.25, 3.25); of "b" is (50.5, 51)
    assert list(result.index) == [13, 14]


def test_n_at_least_group_size_returns_group_in_order():
    data = _points()

    result = closest_to_centroid(data, "x", "y", "E", n=10)

    assert result.equals(data)


def test_selected_rows_keep_original_order():
    result = closest_to_centroid(_points(), "x", "y", "E", n=3, group_col="g")

    assert list(result.index) == [10, 11, 13, 14, 15]


def test_ties_are_broken_by_row_order():
    data = pd.DataFrame({"x": [-1.0, 1.0, 0.0], "y": [0.0, 0.0, 5.0]})

    result = closest_to_centroid(data, "x", "y", "E", n=1)

    # centroid (0, 5/3): rows 0 and 1 are equally close
    assert list(result.index) == [0]


def test_geographic_centroid():
    data = pd.DataFrame(
        {
            "Longitude": [-100.0, -99.0, -98.0, -60.0],
            "Latitude": [40.0, 40.0, 40.0, 40.0],
        }
    )

    result = closest_to_centroid(data, "Longitude", "Latitude", "G", n=1)

    # mean longitude is -89.25, closest point is -98
    assert list(result.index) == [2]


def test_invalid_arguments():
    data = _points()

    with pytest.raises(InvalidColumnError):
        closest_to_centroid(data, "x", "z", "E")
    with pytest.raises(InvalidOptionError):
        closest_to_centroid(data, "x", "y", "Q")
    with pytest.raises(InvalidArgumentError):
        closest_to_centroid(data, "x", "y", "E", n=0)
    with pytest.raises(InvalidColumnError):
        closest_to_centroid(data, "x", "y", "E", group_col="missing")
