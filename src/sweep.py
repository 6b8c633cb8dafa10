import argparse
import csv
import json
import time
from pathlib import Path

import numpy as np
from tqdm import tqdm

from blobs.metrics import is_finite, kinetic_energy, mean_edge_length, mean_radius
from blobs.ring import new_ring
from blobs.simulation import RingParams, advance


def run_once(vertex_count, dt, args, verbose=False):
    params = RingParams(
        edge_length=args.edge_length,
        repulsion=args.repulsion,
        cohesion=args.cohesion,
        centering=args.centering,
    )
    center = (args.width / 2, args.height / 2)
    ring = new_ring(int(vertex_count), args.radius, center)

    ticks = 0
    step_range = tqdm(range(args.steps), desc="    Ticks", leave=False) if verbose else range(args.steps)
    for _ in step_range:
        advance(ring, dt, center, params)
        ticks += 1
        if not is_finite(ring):
            # No point continuing once NaN/Inf appeared
            break

    finite = is_finite(ring)
    return {
        "finite": int(finite),
        "mean_radius": mean_radius(ring) if finite else float("nan"),
        "mean_edge_length": mean_edge_length(ring) if finite else float("nan"),
        "kinetic_energy": kinetic_energy(ring) if finite else float("nan"),
        "ticks": ticks,
    }


def main():
    p = argparse.ArgumentParser(description="Stability sweep for blob rings over vertex count and dt.")
    # Grid
    p.add_argument("--n-min", type=int, default=3)
    p.add_argument("--n-max", type=int, default=390)
    p.add_argument("--dt-min", type=float, default=0.005)
    p.add_argument("--dt-max", type=float, default=0.05)
    p.add_argument("--grid", type=int, default=5, help="grid size per axis")

    # Ring parameters
    p.add_argument("--radius", type=float, default=100.0)
    p.add_argument("--edge-length", type=float, default=0.5)
    p.add_argument("--repulsion", type=float, default=1.0)
    p.add_argument("--cohesion", type=float, default=1.0)
    p.add_argument("--centering", type=float, default=0.25)
    p.add_argument("--width", type=float, default=1000.0)
    p.add_argument("--height", type=float, default=1000.0)

    # Run control
    p.add_argument("--steps", type=int, default=1000)

    # Output
    p.add_argument("--out", type=str, default="sweep_out")
    p.add_argument("--verbose", action="store_true", help="Show a progress bar for each run")

    args = p.parse_args()
    outdir = Path(args.out)
    outdir.mkdir(parents=True, exist_ok=True)

    # Save a copy of arguments for provenance
    with open(outdir / "args.json", "w") as f:
        json.dump(vars(args), f, indent=2)

    fieldnames = ["vertex_count", "dt", "finite", "mean_radius", "mean_edge_length", "kinetic_energy", "ticks"]
    csv_path = outdir / "results.csv"

    n_vals = np.unique(np.linspace(args.n_min, args.n_max, args.grid).round().astype(int))
    dt_vals = np.linspace(args.dt_min, args.dt_max, args.grid)
    total_runs = len(n_vals) * len(dt_vals)

    print(f"\nStarting stability sweep:")
    print(f"  - Vertex counts: {', '.join(str(n) for n in n_vals)}")
    print(f"  - dt values: {', '.join(f'{dt:.4f}' for dt in dt_vals)}")
    print(f"  - Ticks per run: {args.steps}")
    print(f"  - Output directory: {outdir}\n")

    start_time = time.time()
    with open(csv_path, "w", newline="") as fcsv:
        writer = csv.DictWriter(fcsv, fieldnames=fieldnames)
        writer.writeheader()

        with tqdm(total=total_runs, desc="Overall Progress", unit="run", miniters=1) as pbar:
            for n in n_vals:
                for dt in dt_vals:
                    pbar.set_postfix({"n": int(n), "dt": f"{dt:.4f}"})
                    res = run_once(n, float(dt), args, args.verbose)
                    writer.writerow({"vertex_count": int(n), "dt": float(dt), **res})
                    fcsv.flush()  # Force write to disk
                    pbar.update(1)

    print(f"\nAll done in {time.time() - start_time:.1f}s. Results saved to: {csv_path}")
    print(f"Next step: python plot_heatmaps.py --csv {csv_path} --out plots")


if __name__ == "__main__":
    main()
