import os
import tempfile
import numpy as np
from typing import List, Union

def pairwise_distance_matrix(coords: np.ndarray, metric: str = "euclidean") -> np.ndarray:
    coords = np.asarray(coords, dtype=float)
    if coords.size == 0:
        return np.zeros((0, 0), dtype=float)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise ValueError(f"coords must have shape (n, 2), got {coords.shape}")
    if metric != "euclidean":
        raise ValueError("Unknown metric")
    n = coords.shape[0]
    D = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i+1, n):
            d = float(np.linalg.norm(coords[i] - coords[j]))
            D[i, j] = D[j, i] = d
    return D

def route_length(route: List[int], D: np.ndarray) -> float:
    n = len(route)
    total = 0.0
    for i in range(n):
        total += D[route[i], route[(i+1) % n]]
    return total

class ConvergenceTracker:
    def __init__(self):
        self.best_cost = float("inf")
        self.best_iter = -1
        self.history = []

    def update(self, iter_idx: int, cost: float):
        if cost < self.best_cost - 1e-12:
            self.best_cost = cost
            self.best_iter = iter_idx
        self.history.append((iter_idx, self.best_cost))

    @property
    def time_convergence_iter(self) -> int:
        return self.best_iter + 1

def _parse_dimension(line: str) -> int:
    _, _, value = line.partition(":")
    if not value.strip():
        # "DIMENSION 52" without a colon
        value = line.split()[-1]
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"Bad DIMENSION line: {line!r}") from None

def load_tsplib(path: Union[str, os.PathLike]) -> np.ndarray:
    """
    Read city coordinates from a TSPLIB-style file:
      - header lines, one of them "DIMENSION : N"
      - NODE_COORD_SECTION followed by "index x y" lines
      - optional EOF marker

    Returns coords : np.ndarray (N, 2)
    Raises ValueError when the header or the coordinate section is malformed,
    or when the number of coordinates does not match DIMENSION.
    """
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        lines = [ln.strip() for ln in f if ln.strip()]

    dim = None
    start = None
    for i, ln in enumerate(lines):
        key = ln.upper()
        if key.startswith("DIMENSION"):
            dim = _parse_dimension(ln)
        elif key.startswith("NODE_COORD_SECTION"):
            start = i + 1
            break
    if dim is None:
        raise ValueError(f"{path}: missing DIMENSION field")
    if start is None:
        raise ValueError(f"{path}: missing NODE_COORD_SECTION")

    coords = []
    for ln in lines[start:]:
        if ln.upper().startswith("EOF"):
            break
        parts = ln.split()
        if len(parts) < 3:
            raise ValueError(f"{path}: malformed coordinate line {ln!r}")
        try:
            coords.append((float(parts[1]), float(parts[2])))
        except ValueError:
            raise ValueError(f"{path}: malformed coordinate line {ln!r}") from None

    if dim <= 0 or not coords:
        raise ValueError(f"{path}: instance has no cities")
    if len(coords) != dim:
        raise ValueError(f"{path}: DIMENSION is {dim} but {len(coords)} coordinates were read")
    return np.array(coords, dtype=float)

def load_tsplib_bytes(data: bytes, suffix: str = ".tsp") -> np.ndarray:
    """Parse an uploaded TSPLIB file through a temporary copy that is always removed."""
    with tempfile.NamedTemporaryFile("wb", suffix=suffix, delete=False) as tf:
        tf.write(data)
        tmp_path = tf.name
    try:
        return load_tsplib(tmp_path)
    finally:
        os.remove(tmp_path)

def generate_simulated_coords(n: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.random((n,2)) * 100.0
