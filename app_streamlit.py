import numpy as np
import pandas as pd
import streamlit as st
import matplotlib.pyplot as plt

from utils import (
    generate_simulated_coords, pairwise_distance_matrix, load_tsplib_bytes,
)
from tsp_aco import ACOParams, run_aco
from viz_tsp import plot_experiment_curves, plot_tour


def explain_aco_params():
    with st.expander("What do these parameters mean?"):
        st.markdown(
            "- **rho**: share of pheromone that evaporates at the end of each experiment.\n"
            "- **q**: pheromone deposited per tour is q / tour length.\n"
            "- **alpha / beta**: weight of the pheromone trail vs. inverse distance when an ant picks its next city.\n"
            "- **Ants / Tours / Experiments**: ants per round, rounds per experiment, independent experiments per run.\n"
            "- **Carry pheromone**: keep the same pheromone matrix from one experiment to the next.\n"
            "- **Random seed**: fixes the instance and the ants' choices for reproducible results."
        )

def plot_convergence(history, title="Convergence curve"):
    iters = [h[0] for h in history]; bests = [h[1] for h in history]
    plt.figure(); plt.plot(iters, bests)
    plt.xlabel("Round"); plt.ylabel("Best tour length so far"); plt.title(title)
    st.pyplot(plt.gcf())

st.set_page_config(page_title="ACO TSP", layout="wide")
st.title("Ant Colony TSP Dashboard")

if "aco_state" not in st.session_state:
    st.session_state.aco_state = None

with st.sidebar:
    st.header("Colony parameters")
    defaults = ACOParams()
    rho = st.slider("rho (evaporation)", 0.01, 0.99, defaults.rho, step=0.01)
    q = st.number_input("q (deposit)", value=defaults.q, min_value=0.001, step=0.1)
    alpha = st.slider("alpha", 0.0, 5.0, defaults.alpha, step=0.1)
    beta = st.slider("beta", 0.0, 5.0, defaults.beta, step=0.1)
    n_ants = st.number_input("Ants per round", value=defaults.n_ants, min_value=1, step=1)
    tours = st.number_input("Tours per experiment", value=100, min_value=1, step=10)
    experiments = st.number_input("Experiments", value=defaults.experiments, min_value=1, step=1)
    carry = st.checkbox("Carry pheromone across experiments", value=False)
    seed = st.number_input("Random seed", value=0, step=1)
    explain_aco_params()

tab1, tab2 = st.tabs(["Simulated cities", "TSPLIB file"])

coords = None
with tab1:
    n = st.slider("Number of cities n", 4, 200, 30, step=1)
    if st.button("Run ACO (Simulated)"):
        coords = generate_simulated_coords(n, seed=int(seed))

with tab2:
    upload = st.file_uploader("TSPLIB file (NODE_COORD_SECTION)", type=["tsp", "txt"])
    if upload is not None and st.button("Run ACO (File)"):
        try:
            coords = load_tsplib_bytes(upload.getvalue())
        except ValueError as err:
            st.session_state.aco_state = {"error": str(err)}

if coords is not None:
    params = ACOParams(rho=rho, q=q, alpha=alpha, beta=beta, n_ants=int(n_ants),
                       tours=int(tours), experiments=int(experiments), carry_pheromone=carry)
    D = pairwise_distance_matrix(coords, metric="euclidean")
    with st.spinner("Running colony..."):
        res = run_aco(D, params=params, seed=int(seed))
    st.session_state.aco_state = {"coords": coords.tolist(), "res": res}

state = st.session_state.aco_state
if state:
    if "error" in state:
        st.error(state["error"])
    else:
        coords = np.array(state["coords"]); res = state["res"]
        st.subheader("Summary")
        df = pd.DataFrame([
            {"Experiment": i, "Mean best": b, "Mean average": a}
            for i, (b, a) in enumerate(res["experiments"])
        ])
        st.dataframe(df, use_container_width=True)
        st.markdown(
            f"**Best tour length:** {res['best_cost']:.3f} (experiment {res['best_experiment']}) "
            f"| **Runtime:** {res['runtime']:.2f}s"
        )
        c1, c2, c3 = st.columns(3)
        with c1:
            st.pyplot(plot_tour(coords, res["route"], title="Best tour"))
        with c2:
            st.pyplot(plot_experiment_curves(res["experiments"], title="Per-experiment means"))
        with c3:
            plot_convergence(res["history"], "Best experiment convergence")
