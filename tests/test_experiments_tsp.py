import pandas as pd
import pytest

from experiments_tsp import main, summary_frame
from viz_tsp import plot_experiment_curves, plot_tour
from utils import generate_simulated_coords


def test_cli_on_tsplib_instance(write_tsp, tmp_path, capsys):
    path = write_tsp()
    outdir = tmp_path / "out"

    res = main(["--instance", str(path), "--tours", "5", "--experiments", "2",
                "--seed", "3", "--outdir", str(outdir)])

    df = pd.read_csv(outdir / "tiny_aco_summary.csv")
    assert list(df.columns) == ["experiment", "mean_best", "mean_avg"]
    assert len(df) == 2
    assert (df["mean_best"] <= df["mean_avg"] + 1e-9).all()
    assert (outdir / "tiny_aco_curves.png").exists()
    assert (outdir / "tiny_aco_tour.png").exists()
    assert sorted(res["route"]) == [0, 1, 2, 3, 4]

    out = capsys.readouterr().out
    assert "Loaded: tiny | cities=5" in out
    assert "Best tour length:" in out


def test_cli_simulated_quiet(tmp_path, capsys):
    outdir = tmp_path / "sim"
    main(["--n", "6", "--tours", "3", "--experiments", "1", "--n_ants", "4",
          "--carry-pheromone", "--quiet", "--outdir", str(outdir)])

    assert (outdir / "sim6_aco_summary.csv").exists()
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("argv", [
    ["--n", "5", "--rho", "1.0"],
    ["--n", "5", "--n_ants", "0"],
    ["--n", "0"],
])
def test_cli_rejects_bad_config(tmp_path, argv):
    with pytest.raises(SystemExit) as exc:
        main(argv + ["--outdir", str(tmp_path)])
    assert exc.value.code == 2


def test_cli_rejects_mismatched_instance(write_tsp, tmp_path):
    body = "DIMENSION : 4\nNODE_COORD_SECTION\n1 0 0\n2 1 1\nEOF\n"
    path = write_tsp(body, name="short.tsp")
    with pytest.raises(SystemExit):
        main(["--instance", str(path), "--outdir", str(tmp_path)])


def test_cli_requires_a_source():
    with pytest.raises(SystemExit):
        main([])


def test_summary_frame_rows():
    df = summary_frame({"experiments": [(4.0, 5.0), (3.5, 4.5)]})
    assert df.to_dict(orient="records") == [
        {"experiment": 0, "mean_best": 4.0, "mean_avg": 5.0},
        {"experiment": 1, "mean_best": 3.5, "mean_avg": 4.5},
    ]


def test_plots_return_figures():
    coords = generate_simulated_coords(5, seed=0)
    fig = plot_tour(coords, [0, 2, 4, 1, 3])
    assert len(fig.axes) == 1
    fig = plot_experiment_curves([(4.0, 5.0), (3.5, 4.5)])
    labels = [ln.get_label() for ln in fig.axes[0].get_lines()]
    assert labels == ["Average So Far", "Best So Far"]
