from linechart.chart import LineChart, RenderTicket
from linechart.config import ChartConfig, load_chart_config
from linechart.curves import evaluate_segment, solve_control_points
from linechart.errors import ChartDataError, RenderInProgressError
from linechart.geometry import ChartBounds, calculate_sizes, compute_value_range, map_points
from linechart.paths import ChartPath, ChartPaths, build_paths
from linechart.provider import ChartDataSource, ChartDelegate, StaticDataSource
from linechart.scene import JoinBarrier, LayerNode, LayerSlot, SceneTree
from linechart.series import ChartType, ControlPointPair, ScreenPoint, Series, ValueRange

__all__ = [
    "ChartBounds",
    "ChartConfig",
    "ChartDataError",
    "ChartDataSource",
    "ChartDelegate",
    "ChartPath",
    "ChartPaths",
    "ChartType",
    "ControlPointPair",
    "JoinBarrier",
    "LayerNode",
    "LayerSlot",
    "LineChart",
    "RenderInProgressError",
    "RenderTicket",
    "SceneTree",
    "ScreenPoint",
    "Series",
    "StaticDataSource",
    "ValueRange",
    "build_paths",
    "calculate_sizes",
    "compute_value_range",
    "evaluate_segment",
    "load_chart_config",
    "map_points",
    "solve_control_points",
]
