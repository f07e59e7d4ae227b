from __future__ import annotations
from typing import List, Tuple
import numpy as np
import matplotlib.pyplot as plt

# ------------------------------- Visualization --------------------------------

def plot_experiment_curves(experiments: List[Tuple[float, float]],
                           title: str = "TSP"):
    """
    One point per experiment:
      - "Average So Far": mean of the per-round average tour length
      - "Best So Far"   : mean of the per-round best tour length
    """
    xs = list(range(len(experiments)))
    bests = [b for b, _ in experiments]
    avgs = [a for _, a in experiments]
    fig, ax = plt.subplots(figsize=(4, 4))
    ax.plot(xs, avgs, marker="o", label="Average So Far")
    ax.plot(xs, bests, marker="s", linestyle="--", label="Best So Far")
    ax.set_xlabel("Experiment"); ax.set_ylabel("Tour length")
    ax.set_title(title)
    ax.legend(); ax.grid(True)
    fig.tight_layout()
    return fig


def plot_tour(coords: np.ndarray, route: List[int], title: str = "Best tour"):
    """Cities as dots, the closed tour as a polyline, start city as a star."""
    xs, ys = coords[:, 0], coords[:, 1]
    fig, ax = plt.subplots()
    ax.scatter(xs, ys, s=20, label="cities")
    path = list(route) + [route[0]]
    ax.plot(xs[path], ys[path], linewidth=1.6, label="tour")
    ax.scatter([xs[route[0]]], [ys[route[0]]], marker="*", s=180, label="start")
    ax.set_title(title)
    ax.set_xlabel("x"); ax.set_ylabel("y")
    ax.legend(); ax.grid(True); ax.axis("equal")
    return fig
