
import argparse
from pathlib import Path

import pandas as pd
import matplotlib.pyplot as plt

METRICS = ["finite", "mean_radius", "mean_edge_length", "kinetic_energy", "ticks"]

def plot_one(df, metric, outdir):
    # Pivot to grid: rows dt, columns vertex count
    table = df.pivot_table(index="dt", columns="vertex_count", values=metric, aggfunc="mean").sort_index(ascending=True)
    fig, ax = plt.subplots(figsize=(6,5))
    im = ax.imshow(table.values, origin="lower", aspect="auto",
                   extent=[table.columns.min(), table.columns.max(),
                           table.index.min(), table.index.max()])
    ax.set_xlabel("vertex_count")
    ax.set_ylabel("dt")
    ax.set_title(f"{metric}")
    plt.colorbar(im, ax=ax)
    outpath = Path(outdir) / f"{metric}.png"
    fig.tight_layout()
    fig.savefig(outpath, dpi=200)
    plt.close(fig)
    return outpath

def main():
    ap = argparse.ArgumentParser(description="Plot heatmaps from stability sweep CSV.")
    ap.add_argument("--csv", type=str, required=True)
    ap.add_argument("--out", type=str, default="plots")
    args = ap.parse_args()

    outdir = Path(args.out); outdir.mkdir(parents=True, exist_ok=True)
    df = pd.read_csv(args.csv)

    for m in METRICS:
        path = plot_one(df, m, outdir)
        print(f"Saved: {path}")

if __name__ == "__main__":
    main()
