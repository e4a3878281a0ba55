# bell_qsim/plot_results.py
import csv, os
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .correlation import CLASSICAL_BOUND, TSIRELSON_BOUND

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["phi"] = float(row["phi"])
            row["s"]   = float(row["s"])
            rows.append(row)
    return rows

def plot_sweep(csv_path, out_path=None):
    """S vs phi from a sweep CSV, with the classical and Tsirelson bounds drawn in."""
    rows = load_rows(csv_path)
    if not rows:
        return None
    if out_path is None:
        out_path = os.path.join(os.path.dirname(csv_path), "chsh_vs_phi.png")
    xs, ys = zip(*sorted((r["phi"], r["s"]) for r in rows))

    plt.figure()
    plt.plot(xs, ys, marker="o", label="S(phi)")
    plt.axhline(CLASSICAL_BOUND, color="k", ls="--", lw=0.8, label="classical bound")
    plt.axhline(-CLASSICAL_BOUND, color="k", ls="--", lw=0.8)
    plt.axhline(TSIRELSON_BOUND, color="r", ls=":", lw=0.8, label="Tsirelson bound")
    plt.xlabel("Offset phi (rad)")
    plt.ylabel("S")
    plt.title(f"CHSH statistic vs angle offset [{rows[0]['backend']}]")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    return out_path
