#!/usr/bin/env python
"""Command-line entry point for UMAP scatter plots.

Usage
-----
    python run_umap.py --matrix counts.csv --annotations samples.csv \
        --variables group batch --output umap.png

Or to write the raw embedding coordinates instead of a plot:
    python run_umap.py --matrix counts.csv --return-data --output layout.csv
"""

from __future__ import annotations

import argparse
import sys

from umap_scatter import UMAPScatterError, plot_umap
from umap_scatter.io import load_annotations, load_matrix


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Draw a UMAP scatter plot of a feature-by-sample matrix")
    parser.add_argument(
        "--matrix", required=True,
        help="CSV/TSV with features as rows and sample IDs as columns",
    )
    parser.add_argument(
        "--annotations", default=None,
        help="CSV/TSV with an 'id' column and the variables to plot",
    )
    parser.add_argument(
        "--variables", nargs="+", default=["VarFill", "VarShape"],
        help="1-3 annotation columns used for fill, shape and ellipses",
    )
    parser.add_argument("--legend-names", nargs="+", default=None, help="Legend titles for --variables")
    parser.add_argument("--neighbors", type=int, default=5, help="UMAP n_neighbors (default: 5)")
    parser.add_argument("--components", type=int, default=2, help="UMAP n_components (default: 2)")
    parser.add_argument("--epochs", type=int, default=10000, help="UMAP n_epochs (default: 10000)")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument("--transform", action="store_true", help="log2-transform the matrix first")
    parser.add_argument("--cluster", action="store_true", help="Add an HDBSCAN 'cluster' column")
    parser.add_argument("--min-points", type=int, default=7, help="HDBSCAN minimum points (default: 7)")
    parser.add_argument("--title", default=None, help="Plot title")
    parser.add_argument(
        "--legend-pos", nargs=2, type=float, default=None, metavar=("X", "Y"),
        help="Legend position inside the plot, as fractions of the axes",
    )
    parser.add_argument(
        "--labels", nargs="+", default=None,
        help="Label size, or a column name followed by the label size",
    )
    parser.add_argument(
        "--name-tags", nargs="+", default=None,
        help="Tag size, or column, size, min leader length and box padding",
    )
    parser.add_argument("--return-data", action="store_true", help="Write the embedding layout as CSV")
    parser.add_argument("--output", required=True, help="Output image (or CSV with --return-data)")
    parser.add_argument("--dpi", type=int, default=300, help="Image resolution (default: 300)")
    args = parser.parse_args(argv)

    print(f"Loading matrix from {args.matrix}...")
    matrix = load_matrix(args.matrix)
    print(f"  Loaded {matrix.shape[0]:,} features x {matrix.shape[1]:,} samples")

    annotations = None
    if args.annotations:
        print(f"Loading annotations from {args.annotations}...")
        annotations = load_annotations(args.annotations)

    print("Computing UMAP embedding...")
    try:
        result = plot_umap(
            matrix,
            annotations,
            neighbors=args.neighbors,
            components=args.components,
            epochs=args.epochs,
            seed=args.seed,
            variables=args.variables,
            legend_names=args.legend_names,
            title=args.title,
            legend_pos=args.legend_pos,
            labels=args.labels,
            name_tags=args.name_tags,
            cluster_data=args.cluster,
            min_points=args.min_points,
            transform=args.transform,
            return_data=args.return_data,
        )
    except UMAPScatterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.return_data:
        result.layout.to_csv(args.output)
        print(f"Wrote {len(result.layout):,} coordinates to {args.output}")
    else:
        result.savefig(args.output, dpi=args.dpi)
        print(f"Wrote plot to {args.output}")


if __name__ == "__main__":
    main()
