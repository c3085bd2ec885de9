import numpy as np
import pandas as pd
import pytest

from survey_design.model import MasterMatrix
from survey_design.scripts.blocks import make_blocks


def _blob(rng, lon, lat, size, spread=0.5):
    return pd.DataFrame(
        {
            "Longitude": lon + rng.uniform(-spread, spread, size),
            "Latitude": lat + rng.uniform(-spread, spread, size),
        }
    )


@pytest.fixture
def grid_master():
    """20 x 20 cells with two environmental variables on a regular grid."""
    pc1, pc2 = np.meshgrid(np.linspace(-3, 3, 20), np.linspace(-2, 2, 20))
    lon, lat = np.meshgrid(np.linspace(-110, -100, 20), np.linspace(30, 40, 20))
    data = pd.DataFrame(
        {
            "Longitude": lon.ravel(),
            "Latitude": lat.ravel(),
            "PC1": pc1.ravel(),
            "PC2": pc2.ravel(),
        }
    )
    return MasterMatrix(data_matrix=data)


@pytest.fixture
def block_master(grid_master):
    return make_blocks(grid_master, "PC1", "PC2", n_cols=5, n_rows=5)


@pytest.fixture
def disjoint_block():
    """One block made of two tight geographic clusters ~850 km apart."""
    rng = np.random.default_rng(0)
    west = _blob(rng, -100.0, 40.0, 10).assign(area="west")
    east = _blob(rng, -90.0, 40.0, 10).assign(area="east")
    data = pd.concat([west, east], ignore_index=True)
    data["PC1"] = rng.normal(0, 1, len(data))
    data["PC2"] = rng.normal(0, 1, len(data))
    data["Block"] = 1
    return data


@pytest.fixture
def three_blobs():
    """Three well separated groups of points in E space."""
    rng = np.random.default_rng(3)
    centres = [(0.0, 0.0), (20.0, 0.0), (0.0, 20.0)]
    frames = [
        pd.DataFrame(
            {
                "PC1": cx + rng.normal(0, 0.5, 15),
                "PC2": cy + rng.normal(0, 0.5, 15),
                "blob": i,
            }
        )
        for i, (cx, cy) in enumerate(centres)
    ]
    return pd.concat(frames, ignore_index=True)
