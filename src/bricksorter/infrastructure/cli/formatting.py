"""Shared text formatting for CLI output."""

from __future__ import annotations


def format_percentage(value: float) -> str:
    """Render a completion fraction; never rounds to 0% or 100% falsely."""
    if value == 0:
        return "0%"
    if value == 1:
        return "100%"
    percentage = value * 100
    if percentage < 0.1:
        return "<0.1%"
    if percentage > 99.9:
        return ">99.9%"
    return f"{percentage:.1f}%"


def progress_bar(value: float, width: int = 20) -> str:
    filled = int(round(max(0.0, min(1.0, value)) * width))
    return "#" * filled + "-" * (width - filled)
