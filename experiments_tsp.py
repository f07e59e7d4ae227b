"""
Run the ant colony over one TSP instance (a TSPLIB file or a simulated one).
Prints per-experiment summaries and the best tour, then saves into outdir/:
  - <stem>_aco_summary.csv : experiment, mean_best, mean_avg
  - <stem>_aco_curves.png  : Average So Far / Best So Far per experiment
  - <stem>_aco_tour.png    : best tour overlay
"""
from pathlib import Path
import argparse
import pandas as pd
import matplotlib
matplotlib.use("Agg")  # headless backend for tests / CI
import matplotlib.pyplot as plt

from utils import load_tsplib, generate_simulated_coords, pairwise_distance_matrix
from tsp_aco import ACOParams, run_aco
from viz_tsp import plot_experiment_curves, plot_tour


def summary_frame(res) -> pd.DataFrame:
    rows = []
    for i, (mean_best, mean_avg) in enumerate(res["experiments"]):
        rows.append({"experiment": i, "mean_best": mean_best, "mean_avg": mean_avg})
    return pd.DataFrame(rows)


def run_instance(coords, params: ACOParams, seed=0, stem="tsp", outdir=Path("outputs"), verbose=True):
    D = pairwise_distance_matrix(coords, metric="euclidean")
    res = run_aco(D, params=params, seed=seed, verbose=verbose)

    outdir = Path(outdir)
    outdir.mkdir(exist_ok=True, parents=True)
    df = summary_frame(res)
    csv_path = outdir / f"{stem}_aco_summary.csv"
    df.to_csv(csv_path, index=False)

    fig1 = plot_experiment_curves(res["experiments"], title=f"TSP ({stem})")
    f1 = outdir / f"{stem}_aco_curves.png"
    fig1.savefig(f1, dpi=150)
    fig2 = plot_tour(coords, res["route"], title=f"Best tour ({stem}): {res['best_cost']:.3f}")
    f2 = outdir / f"{stem}_aco_tour.png"
    fig2.savefig(f2, dpi=150)
    plt.close("all")

    if verbose:
        print("Average Average:", df["mean_avg"].round(3).tolist())
        print("Average Best:", df["mean_best"].round(3).tolist())
        print(f"Best tour length: {res['best_cost']:.3f} (experiment {res['best_experiment']}) | "
              f"Runtime: {res['runtime']:.2f}s")
        for p in (csv_path, f1, f2):
            print(f"Saved: {p}")
    return res, csv_path


def build_parser() -> argparse.ArgumentParser:
    defaults = ACOParams()
    parser = argparse.ArgumentParser(description="Ant colony TSP runner")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--instance", type=str, help="Path to a TSPLIB file with NODE_COORD_SECTION")
    src.add_argument("--n", type=int, help="Number of simulated cities")
    parser.add_argument("--rho", type=float, default=defaults.rho, help="Evaporation rate in (0, 1)")
    parser.add_argument("--q", type=float, default=defaults.q, help="Pheromone deposit constant")
    parser.add_argument("--alpha", type=float, default=defaults.alpha, help="Pheromone weight")
    parser.add_argument("--beta", type=float, default=defaults.beta, help="Inverse-distance weight")
    parser.add_argument("--n_ants", type=int, default=defaults.n_ants, help="Ants per round")
    parser.add_argument("--tours", type=int, default=defaults.tours, help="Rounds per experiment")
    parser.add_argument("--experiments", type=int, default=defaults.experiments, help="Independent experiments")
    parser.add_argument("--base", type=float, default=defaults.base, help="Base pheromone value")
    parser.add_argument("--carry-pheromone", action="store_true",
                        help="Keep one pheromone matrix across experiments")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--outdir", type=str, default="outputs", help="Directory to save CSV and figures")
    parser.add_argument("--quiet", action="store_true", help="Only print errors")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    params = ACOParams(rho=args.rho, q=args.q, alpha=args.alpha, beta=args.beta,
                       n_ants=args.n_ants, tours=args.tours, experiments=args.experiments,
                       base=args.base, carry_pheromone=args.carry_pheromone)
    try:
        params.validate()
        if args.instance:
            coords = load_tsplib(args.instance)
            stem = Path(args.instance).stem
        else:
            if args.n < 1:
                raise ValueError(f"--n must be positive, got {args.n}")
            coords = generate_simulated_coords(args.n, seed=args.seed)
            stem = f"sim{args.n}"
        if not args.quiet:
            print(f"Loaded: {stem} | cities={len(coords)} | params={params}")
        res, _ = run_instance(coords, params, seed=args.seed, stem=stem,
                              outdir=Path(args.outdir), verbose=not args.quiet)
    except ValueError as err:
        parser.error(str(err))
    return res

if __name__ == "__main__":
    main()
