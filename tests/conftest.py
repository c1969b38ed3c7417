"""
Test Configuration
==================

Pytest fixtures shared by the heatmap_analysis tests.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from heatmap_analysis import AccessPoint, Scene, make_obstacle


@pytest.fixture
def single_ap_scene():
    """One 5 GHz access point at the origin, 100 px per meter, no obstacles."""
    return Scene(
        width=1200,
        height=50,
        access_points=(AccessPoint(x=0, y=0, p0=-40.0, band="5"),),
        scale_px_per_meter=100.0,
    )


@pytest.fixture
def concrete_wall():
    """Concrete wall crossing the x axis at x=500."""
    return make_obstacle((500, -10), (500, 10), "concrete")


@pytest.fixture
def small_scene():
    """Small room with two access points and two walls."""
    return Scene(
        width=40,
        height=30,
        access_points=(
            AccessPoint(x=8.5, y=7.0, p0=-38.0, band="5", label="AP-1"),
            AccessPoint(x=30.0, y=22.5, p0=-42.0, band="2.4", label="AP-2"),
        ),
        obstacles=(
            make_obstacle((20, 0), (20, 18), "brick"),
            make_obstacle((0, 15), (12, 15), "glass"),
        ),
        scale_px_per_meter=4.0,
    )
