"""
Medicine Reminder - UI Components

Theme values shared by the Streamlit pages.
"""

__version__ = "1.0.0"

# UI configuration
THEME_CONFIG = {
    "primary_color": "#2563eb",
    "success_color": "#16a34a",
    "warning_color": "#f59e0b",
    "error_color": "#dc2626",
    "font_family": "Inter, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif"
}

__all__ = [
    "THEME_CONFIG"
]
