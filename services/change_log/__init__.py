# services/change_log/__init__.py
from .runner import build_change_report

__all__ = ["build_change_report"]
