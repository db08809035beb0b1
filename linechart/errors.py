from __future__ import annotations


class ChartDataError(ValueError):
    pass


class RenderInProgressError(RuntimeError):
    pass
