import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from newscale_config import set_config


@pytest.fixture(autouse=True)
def default_config():
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def points():
    return pd.DataFrame({
        'x': [1, 2, 3, 4, 5, 6],
        'y': [2, 4, 1, 5, 3, 6],
        'site': ['p', 'q', 'p', 'q', 'p', 'q'],
        'season': ['s', 's', 't', 't', 's', 't'],
        'kind': ['u', 'v', 'u', 'v', 'u', 'v'],
        'value': [0.5, 1.5, 2.5, 3.5, 4.5, 5.5],
    })
