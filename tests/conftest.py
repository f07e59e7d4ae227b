import matplotlib
matplotlib.use("Agg")  # headless backend for tests / CI

import numpy as np
import pytest


TINY_TSP = """NAME : tiny5
COMMENT : five cities
TYPE : TSP
DIMENSION : 5
EDGE_WEIGHT_TYPE : EUC_2D
NODE_COORD_SECTION
1 0.0 0.0
2 0.0 10.0
3 10.0 10.0
4 10.0 0.0
5 5.0 -3.0
EOF
"""


@pytest.fixture
def unit_square():
    return np.array([[0, 0], [0, 1], [1, 1], [1, 0]], dtype=float)


@pytest.fixture
def write_tsp(tmp_path):
    def write(body=TINY_TSP, name="tiny.tsp"):
        path = tmp_path / name
        path.write_text(body)
        return path
    return write
