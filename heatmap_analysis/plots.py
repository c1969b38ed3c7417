"""Plotting utilities for signal-field reports."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import ListedColormap, Normalize

from .boxcount import FractalResult, samples_frame
from .config import P_GREEN, RSSI_MIN
from .contours import contours_to_geometry
from .propagation import ScalarField
from .raster import field_to_rgb, legend_gradient
from .scene import Scene


__all__ = ["report_plots", "plot_field", "plot_loglog"]


def _ensure_output_dir(path: Optional[Path]) -> Path:
    """Ensure the output directory exists and return it."""
    if path is None:
        return Path.cwd()
    path.mkdir(parents=True, exist_ok=True)
    return path


def _finish(fig, save_path: Optional[Path]):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()


def plot_field(
    field: ScalarField,
    scene: Optional[Scene] = None,
    segments: Optional[Sequence] = None,
    title: str = "Signal heatmap",
    save_path: Optional[Path] = None,
):
    """Plot the coloured field with contours, obstacles and access points.

    Args:
        field: Field to render.
        scene: Optional scene whose obstacles and access points are drawn.
        segments: Optional contour segments in field coordinates.
        title: Plot title.
        save_path: Optional save path; the figure is shown otherwise.
    """
    fig, ax = plt.subplots(figsize=(8, 8 * field.height / max(field.width, 1)))
    ax.imshow(field_to_rgb(field), origin="upper", interpolation="nearest")

    if segments is not None and len(segments):
        for line in contours_to_geometry(segments).geoms:
            xs, ys = line.xy
            ax.plot(xs, ys, color="white", linewidth=0.8)

    if scene is not None:
        for obstacle in scene.obstacles:
            ax.plot(
                [obstacle.a[0], obstacle.b[0]],
                [obstacle.a[1], obstacle.b[1]],
                color="firebrick",
                linewidth=2.0,
            )
        for ap in scene.access_points:
            ax.plot(ap.x, ap.y, marker="o", color="steelblue", markeredgecolor="navy")
            ax.annotate(f"{ap.label} {ap.band} GHz", (ap.x, ap.y), xytext=(6, -6),
                        textcoords="offset points", color="navy", fontsize=8)

    legend = ListedColormap(legend_gradient() / 255.0)
    fig.colorbar(
        plt.cm.ScalarMappable(norm=Normalize(RSSI_MIN, P_GREEN), cmap=legend),
        ax=ax,
        label="RSSI (dBm)",
        fraction=0.046,
    )
    ax.set_xlim(0, field.width)
    ax.set_ylim(field.height, 0)
    ax.set_title(title)
    ax.set_xlabel("x (px)")
    ax.set_ylabel("y (px)")
    _finish(fig, save_path)
    return fig


def plot_loglog(result: FractalResult, title: str = "Log-Log Plot", save_path: Optional[Path] = None):
    """Plot log N(s) against log(1/s) with the fitted line.

    Args:
        result: Estimator output.
        title: Plot title.
        save_path: Optional save path.
    """
    fig, ax = plt.subplots(figsize=(6, 5))
    df = samples_frame(result.samples)
    ax.scatter(df["log_inv_scale"], df["log_count"], color="black", label="Samples")
    if len(df) and np.isfinite(result.D):
        x = np.array([df["log_inv_scale"].min(), df["log_inv_scale"].max()])
        ax.plot(x, result.D * x + result.intercept, color="crimson",
                label=f"D={result.D:.3f}, R²={result.R2:.3f}")
        ax.legend()
    ax.set_xlabel("log(1/s)")
    ax.set_ylabel("log N(s)")
    ax.set_title(title)
    ax.grid(True)
    _finish(fig, save_path)
    return fig


def report_plots(
    field: ScalarField,
    scene: Scene,
    segments: Sequence,
    results: Mapping[str, FractalResult],
    output_dir: Optional[Path] = None,
) -> Dict[str, Path]:
    """Write the heatmap figure and one log-log figure per estimator.

    Returns:
        Dict of figure names to paths.
    """
    output_path = _ensure_output_dir(output_dir)
    figures = {"heatmap": output_path / "heatmap.png"}
    plot_field(field, scene, segments, save_path=figures["heatmap"])
    for i, (name, result) in enumerate(results.items(), start=1):
        key = f"loglog{i}"
        figures[key] = output_path / f"{key}.png"
        plot_loglog(result, title=f"{name} (log N vs log 1/s)", save_path=figures[key])
    return figures
