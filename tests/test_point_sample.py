import pandas as pd
import pytest

from survey_design.sampling import (
    InvalidColumnError,
    InvalidOptionError,
    MissingArgumentError,
    get_point_strategy,
    point_sample,
)
from survey_design.scripts.centroids import closest_to_centroid


def test_random_sample_stays_within_groups(block_master):
    data = block_master.data_matrix

    result = point_sample(
        data, "PC1", "PC2", n=2, select_point="random", group_col="Block", seed=3
    )

    assert (result.groupby("Block").size() <= 2).all()
    assert list(result["Block"].unique()) == list(data["Block"].unique())
    for idx, row in result.iterrows():
        assert data.loc[idx, "Block"] == row["Block"]


def test_random_sample_is_reproducible(block_master):
    data = block_master.data_matrix

    first = point_sample(data, "PC1", "PC2", select_point="random", group_col="Block")
    second = point_sample(data, "PC1", "PC2", select_point="random", group_col="Block")

    assert first.equals(second)


def test_random_sample_collapses_duplicate_rows():
    data = pd.DataFrame(
        {
            "Longitude": [1.0, 1.0],
            "Latitude": [2.0, 2.0],
            "PC1": [0.5, 0.5],
            "PC2": [0.1, 0.1],
        }
    )

    result = point_sample(data, "PC1", "PC2", n=2, select_point="random")

    assert len(result) == 1


def test_random_sample_larger_than_group_returns_all(block_master):
    data = block_master.data_matrix.iloc[:3]

    result = point_sample(data, "PC1", "PC2", n=10, select_point="random")

    assert sorted(result.index) == list(data.index)


def test_e_centroid_delegates_to_closest_to_centroid(block_master):
    data = block_master.data_matrix

    result = point_sample(data, "PC1", "PC2", select_point="E_centroid", group_col="Block")
    expected = closest_to_centroid(data, "PC1", "PC2", "E", n=1, group_col="Block")

    assert result.equals(expected)
    assert len(result) == data["Block"].nunique()


def test_g_centroid_uses_geographic_columns(block_master):
    data = block_master.data_matrix

    result = point_sample(data, "PC1", "PC2", select_point="G_centroid", group_col="Block")
    expected = closest_to_centroid(
        data, "Longitude", "Latitude", "G", n=1, group_col="Block"
    )

    assert result.equals(expected)


def test_g_centroid_requires_coordinates():
    data = pd.DataFrame({"PC1": [0.0, 1.0], "PC2": [1.0, 0.0]})

    assert point_sample(data, "PC1", "PC2").shape[0] == 1
    with pytest.raises(InvalidColumnError, match="Longitude"):
        point_sample(data, "PC1", "PC2", select_point="G_centroid")


def test_invalid_arguments(block_master):
    data = block_master.data_matrix

    with pytest.raises(InvalidColumnError):
        point_sample(data, "PC1", "PC9")
    with pytest.raises(MissingArgumentError):
        point_sample(data, None, "PC2")
    with pytest.raises(InvalidOptionError):
        point_sample(data, "PC1", "PC2", select_point="median")


def test_strategy_registry():
    strategy = get_point_strategy("random")

    assert strategy is get_point_strategy("random")


def test_selection_is_logged_with_rule_name(block_master, caplog):
    data = block_master.data_matrix

    with caplog.at_level("DEBUG", logger="survey.sampling.service"):
        point_sample(data, "PC1", "PC2", group_col="Block")

    expected = f"Closest to E centroid selection: 25 of {len(data)} points"
    assert expected in caplog.text
