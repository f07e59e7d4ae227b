"""
tsp_aco.py
----------
Ant Colony Optimisation for the symmetric Euclidean TSP.

One run = `experiments` independent experiments; one experiment = `tours`
rounds followed by a single evaporation; one round = `n_ants` ants each
building a full tour against the same pheromone matrix, after which every
ant deposits q / L on the edges of its tour.

    D = pairwise_distance_matrix(coords)
    res = run_aco(D, seed=0, tours=200)
    res["experiments"]   # [(mean_best, mean_avg), ...]
    res["route"], res["best_cost"]

City selection is a rejection scan rather than a roulette wheel: candidates
are visited in index order (wrapping) and the first one whose p = score / Z
beats a fresh uniform draw is taken. Lower indices are slightly favoured.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, List, Optional
import math
import random
import time
import numpy as np

from utils import ConvergenceTracker


# ---------------- Parameters ----------------

@dataclass
class ACOParams:
    rho: float = 0.6             # evaporation rate, applied once per experiment
    q: float = 1.0               # deposit constant
    alpha: float = 0.8           # pheromone influence
    beta: float = 0.8            # inverse-distance influence
    n_ants: int = 10             # ants per round
    tours: int = 500             # rounds per experiment
    experiments: int = 10        # independent experiments per run
    base: float = 1.0            # initial / floor pheromone
    carry_pheromone: bool = False  # share one store across experiments

    def validate(self) -> "ACOParams":
        if not 0.0 < self.rho < 1.0:
            raise ValueError(f"rho must be in (0, 1), got {self.rho}")
        for name in ("n_ants", "tours", "experiments"):
            v = getattr(self, name)
            if isinstance(v, bool) or not math.isfinite(v) or int(v) != v or v < 1:
                raise ValueError(f"{name} must be a positive integer, got {v}")
        if self.q <= 0:
            raise ValueError(f"q must be positive, got {self.q}")
        if self.base <= 0:
            raise ValueError(f"base pheromone must be positive, got {self.base}")
        if self.alpha < 0 or self.beta < 0:
            raise ValueError("alpha and beta must be non-negative")
        return self


# ---------------- Pheromone store ----------------

class PheromoneStore:
    """
    Symmetric n x n pheromone matrix. Off-diagonal entries stay > 0:
    evaporation resets anything that decays to zero back to `base`.
    """

    def __init__(self, n: int, base: float = 1.0):
        self.n = n
        self.base = base
        self.initialize()

    def initialize(self, n: Optional[int] = None, base: Optional[float] = None) -> None:
        if n is not None:
            self.n = n
        if base is not None:
            self.base = base
        self.tau = np.full((self.n, self.n), float(self.base))
        np.fill_diagonal(self.tau, 0.0)
        self._off_diag = ~np.eye(self.n, dtype=bool)

    def evaporate(self, rho: float) -> None:
        if not 0.0 <= rho <= 1.0:
            raise ValueError(f"rho must be in [0, 1], got {rho}")
        self.tau *= (1.0 - rho)
        collapsed = (self.tau <= 0.0) & self._off_diag
        self.tau[collapsed] = self.base

    def intensify(self, tour: List[int], tour_length: float, q: float) -> None:
        # one city, or every city on the same spot: nothing to reward
        if len(tour) < 2 or tour_length <= 0:
            return
        delta = q / tour_length
        tour = list(tour)
        for a, b in zip(tour, tour[1:] + [tour[0]]):
            self.tau[a, b] += delta
            self.tau[b, a] += delta

    def snapshot(self) -> np.ndarray:
        snap = self.tau.copy()
        snap.flags.writeable = False
        return snap


def heuristic(D: np.ndarray) -> np.ndarray:
    eta = 1.0 / (D + 1e-12)
    np.fill_diagonal(eta, 0.0)
    return eta

def desirability(tau: np.ndarray, eta: np.ndarray, alpha: float, beta: float) -> np.ndarray:
    return (tau ** alpha) * (eta ** beta)


# ---------------- Agent ----------------

class Ant:
    def __init__(self, n: int, rng: random.Random):
        self.n = n
        self.rng = rng
        self.current = rng.randrange(n)
        self.tabu = np.zeros(n, dtype=bool)
        self.tabu[self.current] = True
        self.tour = [self.current]
        self.tour_length = 0.0

    def select_next(self, weights: np.ndarray) -> int:
        """
        Pick the next city from `weights[current]` (tau^alpha * eta^beta).
        Falls back to a uniform pick among unvisited cities when every
        score is zero (or the sum overflows).
        """
        free = (~self.tabu).tolist()
        scores = np.where(self.tabu, 0.0, weights[self.current])
        Z = float(scores.sum())
        if not (Z > 0.0 and math.isfinite(Z)):
            return self.rng.choice([j for j in range(self.n) if free[j]])
        p = (scores / Z).tolist()
        j = 0
        while True:
            if free[j] and self.rng.random() < p[j]:
                return j
            j = (j + 1) % self.n

    def advance(self, to: int, D: np.ndarray) -> None:
        self.tabu[to] = True
        self.tour.append(to)
        self.tour_length += D[self.current, to]
        self.current = to

    def construct(self, weights: np.ndarray, D: np.ndarray) -> List[int]:
        for _ in range(self.n - 1):
            self.advance(self.select_next(weights), D)
        self.tour_length += D[self.tour[-1], self.tour[0]]
        return self.tour


# ---------------- Round / experiment / run ----------------

def run_round(store: PheromoneStore, D: np.ndarray, eta: np.ndarray,
              params: ACOParams, rng: random.Random) -> Dict[str, Any]:
    n = D.shape[0]
    # tau is not touched until every ant has finished its tour
    weights = desirability(store.tau, eta, params.alpha, params.beta)
    ants = [Ant(n, rng) for _ in range(params.n_ants)]
    for ant in ants:
        ant.construct(weights, D)
    for ant in ants:
        store.intensify(ant.tour, ant.tour_length, params.q)

    costs = [float(ant.tour_length) for ant in ants]
    idx = int(np.argmin(costs))
    return {"best_cost": costs[idx], "avg_cost": sum(costs) / len(costs),
            "route": ants[idx].tour[:], "costs": costs}

def run_experiment(store: PheromoneStore, D: np.ndarray, eta: np.ndarray,
                   params: ACOParams, rng: random.Random) -> Dict[str, Any]:
    tracker = ConvergenceTracker()
    best_sum = 0.0; avg_sum = 0.0
    best_cost = float("inf"); best_route = None
    for it in range(params.tours):
        rnd = run_round(store, D, eta, params, rng)
        best_sum += rnd["best_cost"]
        avg_sum += rnd["avg_cost"]
        if rnd["best_cost"] < best_cost:
            best_cost = rnd["best_cost"]; best_route = rnd["route"]
        tracker.update(it, best_cost)
    store.evaporate(params.rho)
    return {"mean_best": best_sum / params.tours, "mean_avg": avg_sum / params.tours,
            "route": best_route, "best_cost": best_cost, "history": tracker.history,
            "time_convergence_iter": tracker.time_convergence_iter}

def run_aco(D: np.ndarray,
            params: Optional[ACOParams] = None,
            seed: int = 0,
            rng: Optional[random.Random] = None,
            verbose: bool = False,
            **overrides) -> Dict[str, Any]:
    params = replace(params or ACOParams(), **overrides).validate()
    D = np.asarray(D, dtype=float)
    if D.ndim != 2 or D.shape[0] != D.shape[1]:
        raise ValueError(f"distance matrix must be square, got shape {D.shape}")
    n = D.shape[0]
    if n == 0:
        raise ValueError("no cities to tour")
    if not np.all(np.isfinite(D)) or np.any(D < 0):
        raise ValueError("distances must be finite and non-negative")
    if rng is None:
        rng = random.Random(seed)
    eta = heuristic(D)

    experiments = []
    best_cost = float("inf"); best = None; best_idx = -1
    store = None
    t0 = time.time()
    for e in range(params.experiments):
        if store is None or not params.carry_pheromone:
            store = PheromoneStore(n, params.base)
        exp = run_experiment(store, D, eta, params, rng)
        experiments.append((exp["mean_best"], exp["mean_avg"]))
        if exp["best_cost"] < best_cost:
            best_cost = exp["best_cost"]; best = exp; best_idx = e
        if verbose:
            print(f"Experiment {e}: mean best={exp['mean_best']:.3f} "
                  f"mean avg={exp['mean_avg']:.3f} best={exp['best_cost']:.3f}")
            print("Optimal Path:", exp["route"])

    runtime = time.time() - t0
    return {"experiments": experiments, "route": best["route"], "best_cost": best_cost,
            "best_experiment": best_idx, "history": best["history"],
            "time_convergence_iter": best["time_convergence_iter"], "runtime": runtime,
            "params": asdict(params), "pheromone": store.snapshot()}
