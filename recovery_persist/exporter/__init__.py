from .exporter import export_run_metrics

__all__ = ["export_run_metrics"]
