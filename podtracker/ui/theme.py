from __future__ import annotations

COLORS = {
    "primary": "#2563eb",
    "background": "#0b1020",
    "surface": "#121836",
    "text": "#e5e7eb",
    "muted": "#94a3b8",
    "success": "#16a34a",
    "warning": "#d97706",
    "danger": "#dc2626",
}


def pod_badge_color(pod: int) -> str:
    # Future operative dates (scheduled surgery) get a distinct colour.
    return COLORS["warning"] if pod < 0 else COLORS["success"]
