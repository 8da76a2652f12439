"""Dashboard feature module: today's work, reminders and tracked time."""

from task_tracker.features.dashboard.context import DashboardContext, build_dashboard_context

__all__ = [
    "DashboardContext",
    "build_dashboard_context",
]
