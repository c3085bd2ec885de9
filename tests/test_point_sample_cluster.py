import numpy as np
import pandas as pd
import pytest
from scipy import stats

from survey_design.sampling import (
    InvalidArgumentError,
    InvalidOptionError,
    MissingArgumentError,
    point_sample_cluster,
)
from survey_design.sampling.cluster import distance_modes, split_distance_from_modes
from survey_design.scripts.centroids import closest_to_centroid
from survey_design.scripts.geodesic import geographic_distances


def _unimodal_distances(size=200):
    return stats.norm.ppf(np.linspace(0.01, 0.99, size)) * 100 + 1000


def test_bimodal_block_gives_one_point_per_area(disjoint_block):
    distances = geographic_distances(disjoint_block, "Block")

    result = point_sample_cluster(
        disjoint_block,
        "PC1",
        "PC2",
        distances,
        select_point="G_centroid",
        group_col="Block",
    )
    expected = closest_to_centroid(
        disjoint_block, "Longitude", "Latitude", "G", n=1, group_col="area"
    )

    assert len(result) == 2
    assert sorted(result["area"]) == ["east", "west"]
    assert sorted(result.index) == sorted(expected.index)
    assert "clusters" not in result.columns
    assert list(result.columns) == list(disjoint_block.columns)


def test_bimodal_block_with_kmeans(disjoint_block):
    distances = geographic_distances(disjoint_block, "Block")

    result = point_sample_cluster(
        disjoint_block,
        "PC1",
        "PC2",
        distances,
        cluster_method="kmeans",
        select_point="E_centroid",
        group_col="Block",
    )

    assert len(result) == 2
    assert sorted(result["area"]) == ["east", "west"]


def test_unimodal_block_gives_one_point(disjoint_block):
    data = disjoint_block.iloc[:10]

    result = point_sample_cluster(
        data, "PC1", "PC2", {1: _unimodal_distances()}, group_col="Block"
    )
    expected = closest_to_centroid(data, "PC1", "PC2", "E", n=1)

    assert result.equals(expected)


def test_groups_are_sampled_independently(disjoint_block):
    cohesive = disjoint_block.iloc[:10].assign(Block=2)
    data = pd.concat([cohesive, disjoint_block], ignore_index=True)
    distances = {"2": _unimodal_distances()}
    distances.update(geographic_distances(disjoint_block, "Block"))

    result = point_sample_cluster(data, "PC1", "PC2", distances, group_col="Block")

    assert list(result["Block"]) == [2, 1, 1]


def test_small_groups_fall_back_to_point_sample():
    data = pd.DataFrame(
        {
            "Longitude": [0.0, 0.1],
            "Latitude": [0.0, 0.1],
            "PC1": [1.0, 2.0],
            "PC2": [1.0, 2.0],
            "Block": ["a", "b"],
        }
    )
    distances = geographic_distances(data, "Block")

    result = point_sample_cluster(data, "PC1", "PC2", distances, group_col="Block")

    assert list(result["Block"]) == ["a", "b"]


def test_whole_table_uses_single_distance_set(disjoint_block):
    data = disjoint_block.drop(columns="Block")

    result = point_sample_cluster(
        data, "PC1", "PC2", {"all": geographic_distances(data)[None]}
    )

    assert len(result) == 2


def test_split_distance_uses_two_densest_modes():
    modes = pd.DataFrame({"mode": [1.0, 5.0, 9.0], "density": [0.5, 0.1, 0.3]})

    assert split_distance_from_modes(modes) == 8.0


def test_distance_modes_with_too_few_distances():
    assert distance_modes([]).isna().all().all()
    assert distance_modes([12.0]).isna().all().all()


def test_invalid_arguments(disjoint_block):
    distances = geographic_distances(disjoint_block, "Block")

    with pytest.raises(MissingArgumentError, match="distance_list"):
        point_sample_cluster(disjoint_block, "PC1", "PC2", group_col="Block")
    with pytest.raises(InvalidOptionError):
        point_sample_cluster(
            disjoint_block, "PC1", "PC2", distances, cluster_method="ward"
        )
    with pytest.raises(InvalidOptionError):
        point_sample_cluster(
            disjoint_block, "PC1", "PC2", distances, select_point="mean"
        )
    with pytest.raises(InvalidArgumentError):
        point_sample_cluster(
            disjoint_block, "PC1", "PC2", {99: [1.0, 2.0]}, group_col="Block"
        )


def test_group_key_must_be_in_distance_list(disjoint_block):
    distances = geographic_distances(disjoint_block, "Block")

    with pytest.raises(InvalidArgumentError, match="99"):
        point_sample_cluster(
            disjoint_block.assign(Block=99),
            "PC1",
            "PC2",
            {1: distances[1]},
            group_col="Block",
        )


def test_existing_clusters_column_is_kept(disjoint_block):
    cohesive = disjoint_block.iloc[:10].assign(Block=2)
    data = pd.concat([cohesive, disjoint_block], ignore_index=True).assign(
        clusters="user"
    )
    distances = {2: _unimodal_distances()}
    distances.update(geographic_distances(disjoint_block, "Block"))

    result = point_sample_cluster(data, "PC1", "PC2", distances, group_col="Block")

    assert list(result["Block"]) == [2, 1, 1]
    assert list(result.columns) == list(data.columns)
    assert (result["clusters"] == "user").all()
