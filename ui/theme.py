from __future__ import annotations

from typing import Optional
from PyQt6.QtWidgets import QApplication, QStatusBar

LIGHT_QSS = """
/* App */
QWidget {
    background: #f9fafb;
    color: #1f2937;
    font-family: 'Segoe UI', 'Noto Sans', Arial;
    font-size: 14px;
}

/* Sidebar */
#Sidebar {
    background: #111827;
    border: none;
}
#Sidebar QLabel {
    color: #f9fafb;
    background: transparent;
    padding: 4px 10px;
}
#Sidebar QLabel#Subtitle { color: #9ca3af; font-size: 12px; }
#NavButton {
    color: #f9fafb;
    background: transparent;
    padding: 10px 14px;
    margin: 2px 6px;
    border-radius: 10px;
    text-align: left;
}
#NavButton:hover { background: #1f2937; }
#NavButton:checked {
    background: #f9fafb;
    color: #111827;
    font-weight: 700;
}
#LogoutButton {
    color: #f87171;
    background: #2a1515;
    border: none;
    padding: 10px 14px;
    margin: 2px 6px;
    border-radius: 10px;
}
#LogoutButton:hover { background: #3b1c1c; }

/* Header */
#Header {
    background: #ffffff;
    border-bottom: 1px solid #e5e7eb;
}
#Title {
    font-size: 20px;
    font-weight: 800;
    color: #111827;
}

/* Cards and content */
QFrame#Card {
    background: #ffffff;
    border: 1px solid #e5e7eb;
    border-radius: 14px;
}
QLabel#SectionTitle {
    font-size: 18px;
    font-weight: 700;
    color: #1f2937;
}
QLabel#MetricLabel {
    font-size: 12px;
    letter-spacing: 0.8px;
    color: #6b7280;
}
QLabel#MetricValue {
    font-size: 28px;
    font-weight: 800;
    color: #2563eb;
}
QLabel#PageSummary { color: #4b5563; font-size: 13px; }

/* Tables */
QTableWidget {
    background: #ffffff;
    border: 1px solid #e5e7eb;
    gridline-color: #f3f4f6;
}
QHeaderView::section {
    background: #f9fafb;
    color: #374151;
    font-weight: 600;
    padding: 8px;
    border: none;
    border-bottom: 1px solid #e5e7eb;
}

/* Buttons */
QPushButton {
    background: #ffffff;
    color: #1f2937;
    border: 1px solid #d1d5db;
    padding: 6px 12px;
    border-radius: 8px;
}
QPushButton:hover { background: #f3f4f6; }
QPushButton:disabled { color: #9ca3af; }
QPushButton#Primary, QPushButton#PageButton[current="true"] {
    background: #111827;
    color: #ffffff;
    border: none;
    padding: 8px 16px;
    font-weight: 600;
}
QPushButton#Primary:hover { background: #1f2937; }
QPushButton#Danger {
    background: #dc2626;
    color: white;
    border: none;
    padding: 8px 16px;
    font-weight: 600;
}
QPushButton#Danger:hover { background: #b91c1c; }

QStatusBar { background: #ffffff; border-top: 1px solid #e5e7eb; }
"""

DARK_QSS = """
QWidget {
    background: #0b0f19;
    color: #e5e7eb;
    font-family: 'Segoe UI', 'Noto Sans', Arial;
    font-size: 14px;
}
#Sidebar {
    background: #030712;
}
#Sidebar QLabel { color: #f9fafb; background: transparent; }
#Sidebar QLabel#Subtitle { color: #6b7280; font-size: 12px; }
#NavButton {
    color: #e5e7eb;
    background: transparent;
    padding: 10px 14px;
    margin: 2px 6px;
    border-radius: 10px;
}
#NavButton:hover { background: #111827; }
#NavButton:checked {
    background: #1f2937;
    border: 1px solid #374151;
    color: #ffffff;
    font-weight: 700;
}
#LogoutButton {
    color: #f87171;
    background: #1c0d0d;
    border: none;
    padding: 10px 14px;
    margin: 2px 6px;
    border-radius: 10px;
}
#Header {
    background: #111827;
    border-bottom: 1px solid #1f2937;
}
#Title { color: #f9fafb; font-size: 20px; font-weight: 800; }
QFrame#Card {
    background: #111827;
    border: 1px solid #1f2937;
    border-radius: 14px;
}
QLabel#SectionTitle {
    font-size: 18px;
    font-weight: 700;
    color: #f9fafb;
}
QLabel#MetricLabel {
    font-size: 12px;
    letter-spacing: 0.8px;
    color: #9ca3af;
}
QLabel#MetricValue {
    font-size: 28px;
    font-weight: 800;
    color: #60a5fa;
}
QLabel#PageSummary { color: #9ca3af; font-size: 13px; }
QTableWidget {
    background: #111827;
    border: 1px solid #1f2937;
    gridline-color: #1f2937;
}
QHeaderView::section {
    background: #0b0f19;
    color: #d1d5db;
    font-weight: 600;
    padding: 8px;
    border: none;
    border-bottom: 1px solid #1f2937;
}
QPushButton {
    background: #1f2937;
    color: #f9fafb;
    border: 1px solid #374151;
    padding: 6px 12px;
    border-radius: 8px;
}
QPushButton:hover { background: #273244; }
QPushButton:disabled { color: #4b5563; }
QPushButton#Primary, QPushButton#PageButton[current="true"] {
    background: #f9fafb;
    color: #111827;
    border: none;
    padding: 8px 16px;
    font-weight: 600;
}
QPushButton#Danger {
    background: #991b1b;
    color: white;
    border: 1px solid #b91c1c;
    padding: 8px 16px;
    font-weight: 600;
}
QPushButton#Danger:hover { background: #b91c1c; }
QStatusBar { background: #0b0f19; border-top: 1px solid #1f2937; }
"""

def _toggle_theme(status_bar: Optional[QStatusBar] = None) -> None:
    """Toggle between light and dark themes."""
    app = QApplication.instance()
    if app is None:
        return
    is_dark = "0b0f19" in app.styleSheet()
    app.setStyleSheet(LIGHT_QSS if is_dark else DARK_QSS)
    if status_bar is not None:
        status_bar.showMessage("Light theme" if is_dark else "Dark theme")
