#!/usr/bin/env python3
"""
Compute the Wi-Fi signal field of a saved floor-plan project.

Loads a project JSON (access points, obstacle walls and scale), builds the
RSSI field, extracts contours, estimates the contour box-counting and heatmap
DBC dimensions, and writes the report figures next to the project file.

Usage:
    python examples/analyze_floorplan.py [project.json] [walls.geojson]
"""

import sys
from pathlib import Path

from heatmap_analysis import load_obstacles, load_project, run_analysis, setup_logging


def analyze(project_path: Path, walls_path: Path = None):
    """
    Runs the full analysis for one project and prints the summary table.

    Args:
        project_path: Path to the project JSON file.
        walls_path: Optional vector file with extra obstacle walls.
    """
    if not project_path.exists():
        print(f"Error: Project not found at {project_path}")
        return

    scene = load_project(project_path).with_default_scale()
    if walls_path is not None:
        scene = scene.add_obstacles(load_obstacles(walls_path))

    output_dir = project_path.parent / f"{project_path.stem}_report"
    result = run_analysis(scene, output_dir=output_dir)

    low, high = result["field"].range
    print(f"Field {scene.width}x{scene.height}: {low:.1f} .. {high:.1f} dBm")
    print(f"Contour segments: {len(result['segments'])}")
    print(result["table"].to_string(index=False))
    for name, path in result["figures"].items():
        print(f"{name}: {path}")


def main():
    setup_logging("INFO")
    project = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("examples/data/office.json")
    walls = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    analyze(project, walls)


if __name__ == "__main__":
    main()
