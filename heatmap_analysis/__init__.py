"""Signal-strength fields over floor plans and their fractal analysis."""

from .errors import HeatmapAnalysisError, InvalidInputError, FieldNotReadyError
from .config import (
    CONTOUR_LEVELS,
    DEFAULT_SCALE_PX_PER_METER,
    PropagationModel,
    ContourOptions,
    BoxCountingOptions,
    DBCOptions,
    setup_logging,
)
from .geometry import orient, on_segment, segments_intersect, segments_intersect_many
from .scene import (
    MATERIALS,
    Material,
    AccessPoint,
    ObstacleSegment,
    Scene,
    derive_attenuation,
    repair_obstacle,
    make_obstacle,
)
from .propagation import (
    ScalarField,
    compute_level,
    build_field,
    cached_build_field,
    iter_field_chunks,
)
from .raster import level_to_color, field_to_rgb, legend_gradient, GrayRaster, make_gray_getter
from .contours import extract_contours, contour_points, segment_points, contours_to_geometry
from .regression import Sample, RegressionResult, linear_regression, log_log_regression, fit_with_ci
from .boxcount import (
    FractalResult,
    scale_ladder,
    fractal_dimension_box_counting,
    fractal_dimension_dbc,
    samples_frame,
)
from .io import scene_from_dict, load_project, load_obstacles
from .plots import report_plots, plot_field, plot_loglog
from .workflow import contour_dimension, heatmap_dimension, run_analysis
from .validation import run_sanity_checks

__version__ = "0.1.0"

__all__ = [
    "HeatmapAnalysisError",
    "InvalidInputError",
    "FieldNotReadyError",
    "CONTOUR_LEVELS",
    "DEFAULT_SCALE_PX_PER_METER",
    "PropagationModel",
    "ContourOptions",
    "BoxCountingOptions",
    "DBCOptions",
    "setup_logging",
    "orient",
    "on_segment",
    "segments_intersect",
    "segments_intersect_many",
    "MATERIALS",
    "Material",
    "AccessPoint",
    "ObstacleSegment",
    "Scene",
    "derive_attenuation",
    "repair_obstacle",
    "make_obstacle",
    "ScalarField",
    "compute_level",
    "build_field",
    "cached_build_field",
    "iter_field_chunks",
    "level_to_color",
    "field_to_rgb",
    "legend_gradient",
    "GrayRaster",
    "make_gray_getter",
    "extract_contours",
    "contour_points",
    "segment_points",
    "contours_to_geometry",
    "Sample",
    "RegressionResult",
    "linear_regression",
    "log_log_regression",
    "fit_with_ci",
    "FractalResult",
    "scale_ladder",
    "fractal_dimension_box_counting",
    "fractal_dimension_dbc",
    "samples_frame",
    "scene_from_dict",
    "load_project",
    "load_obstacles",
    "report_plots",
    "plot_field",
    "plot_loglog",
    "contour_dimension",
    "heatmap_dimension",
    "run_analysis",
    "run_sanity_checks",
]
