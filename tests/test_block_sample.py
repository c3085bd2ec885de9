import pytest

from survey_design.model import MasterMatrix, MasterSelection
from survey_design.sampling import (
    InvalidArgumentError,
    InvalidColumnError,
    InvalidOptionError,
    MissingArgumentError,
    MissingPreconditionError,
    block_sample,
)


def _selected_blocks(master):
    data = master.data_matrix
    return set(data.loc[data["Selected_blocks"] == 1, "Block"])


def test_random_selection_is_reproducible(block_master):
    first = _selected_blocks(
        block_sample(block_master, 5, selection_type="random", seed=42)
    )
    second = _selected_blocks(
        block_sample(block_master, 5, selection_type="random", seed=42)
    )

    assert first == second
    assert len(first) == 5


@pytest.mark.parametrize("selection_type", ["uniform", "random"])
@pytest.mark.parametrize("expected", [1, 5, 10, 25])
def test_selected_rows_cover_expected_blocks(block_master, selection_type, expected):
    result = block_sample(block_master, expected, selection_type=selection_type)

    assert len(_selected_blocks(result)) == expected


def test_selection_column_is_appended(block_master):
    columns = list(block_master.data_matrix.columns)

    result = block_sample(block_master, 4, selection_type="uniform", replicates=3)

    assert result is block_master
    assert list(result.data_matrix.columns) == columns + ["Selected_blocks"]
    assert set(result.data_matrix["Selected_blocks"]) == {0, 1}
    # every row of a selected block is selected
    by_block = result.data_matrix.groupby("Block")["Selected_blocks"].nunique()
    assert (by_block == 1).all()


def test_uniform_selection_is_reproducible(block_master):
    first = _selected_blocks(block_sample(block_master, 6, seed=7))
    second = _selected_blocks(block_sample(block_master, 6, seed=7))

    assert first == second


def test_uniform_selection_spreads_blocks(block_master):
    result = block_sample(block_master, 4, selection_type="uniform")
    data = result.data_matrix
    selected = data[data["Selected_blocks"] == 1]

    # four blocks out of a 5 x 5 partition should not all share a column
    assert selected["PC1"].max() - selected["PC1"].min() > 2


def test_works_on_master_selection(block_master):
    selection = MasterSelection.from_master(block_master)

    result = block_sample(selection, 3, selection_type="random")

    assert isinstance(result, MasterSelection)
    assert len(_selected_blocks(result)) == 3


def test_requires_blocks(grid_master):
    with pytest.raises(MissingPreconditionError, match="make_blocks"):
        block_sample(grid_master, 3)


def test_requires_block_arguments(block_master):
    master = MasterMatrix(data_matrix=block_master.data_matrix)

    with pytest.raises(MissingPreconditionError):
        block_sample(master, 3)


def test_block_variables_must_be_columns(block_master):
    master = block_master.with_data(block_master.data_matrix.drop(columns="PC2"))

    with pytest.raises(InvalidColumnError, match="PC2"):
        block_sample(master, 3)


def test_invalid_arguments(block_master):
    with pytest.raises(MissingArgumentError):
        block_sample(None, 3)
    with pytest.raises(MissingArgumentError, match="expected_blocks"):
        block_sample(block_master)
    with pytest.raises(InvalidOptionError):
        block_sample(block_master, 3, selection_type="stratified")
    with pytest.raises(InvalidArgumentError):
        block_sample(block_master, 26)
    with pytest.raises(InvalidArgumentError):
        block_sample(block_master.data_matrix, 3)
