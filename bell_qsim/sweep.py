# bell_qsim/sweep.py
import csv, os, platform, socket, subprocess, time
from datetime import datetime
from typing import Iterable, List

import numpy as np

from .experiment import AngleSet, Experiment

# resolved against the working directory
DATA_DIR = "data"

HEADER = ["phi","e1","e2","e3","e4","s","backend","wall_ms","hostname","commit","timestamp"]

def backend_dir(backend, base=None):
    path = os.path.join(base or DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

def meta_row():
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "python": platform.python_version(),
    }

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

# ---------------------------------------------------------------------

def offset_angles(phi: float) -> AngleSet:
    # a1=0, b1=phi, a2=2phi, b2=3phi; the "chsh" preset is phi=pi/8, S peaks at phi=pi/4
    return AngleSet(0.0, phi, 2*phi, 3*phi)

def phi_grid(points: int, max_phi: float = np.pi/2) -> List[float]:
    return [float(x) for x in np.linspace(0.0, max_phi, points)]

def sweep_angles(phis: Iterable[float], backend: str = "serial", out_path: str = None) -> List[dict]:
    """Run the CHSH experiment for each offset phi; optionally append rows to out_path."""
    if out_path:
        print(f"[run] CHSH sweep → {out_path}")
        new_csv(out_path)
    m = meta_row()
    rows = []
    for phi in phis:
        exp = Experiment(offset_angles(phi), backend=backend)
        t0 = time.perf_counter()
        res = exp.run()
        wall = (time.perf_counter() - t0) * 1e3  # ms
        e1, e2, e3, e4 = res.correlations
        row = {
            "phi": f"{phi:.6f}", "e1": f"{e1:.9f}", "e2": f"{e2:.9f}", "e3": f"{e3:.9f}", "e4": f"{e4:.9f}",
            "s": f"{res.s:.9f}", "backend": backend, "wall_ms": f"{wall:.3f}",
            "hostname": m["hostname"], "commit": m["commit"], "timestamp": m["timestamp"],
        }
        rows.append(row)
        if out_path:
            write_row(out_path, row)
            print(f"  phi={phi:.4f}  S={res.s:+.4f}  wall={wall:.2f} ms")
    if out_path:
        print("✓ done.\n")
    return rows
