from .controller import AnalyticsController
from .report import AnalyticsReport, build_report, period_bounds
from .view import AnalyticsView

__all__ = ["AnalyticsController", "AnalyticsReport", "AnalyticsView", "build_report", "period_bounds"]
