"""Application stylesheet."""

GREEN = "#2f9e7e"
GREEN_DARK = "#268468"
INK = "#1d3330"
BORDER = "#d7e8e2"
PANEL = "#f6fbf9"

APP_STYLE = f"""
QMainWindow, QWidget {{
    background: #eef6f3;
    color: {INK};
    font-family: "Segoe UI";
    font-size: 14px;
}}

QLineEdit, QComboBox, QSpinBox {{
    border: 1px solid #cfe2dc;
    border-radius: 8px;
    padding: 7px 10px;
    background: #ffffff;
    selection-background-color: {GREEN};
}}

QLineEdit:focus, QComboBox:focus, QSpinBox:focus {{
    border-color: {GREEN};
}}

QPushButton {{
    border: none;
    border-radius: 8px;
    padding: 8px 14px;
    font-weight: 600;
}}

QPushButton:disabled {{
    background: #d6e4df;
    color: #809590;
}}

QPushButton#PrimaryButton {{
    background: {GREEN};
    color: #ffffff;
}}

QPushButton#PrimaryButton:hover:!disabled {{
    background: {GREEN_DARK};
}}

QPushButton#SecondaryButton {{
    background: #e6f3ef;
    color: #1f6b55;
    border: 1px solid #c6e0d7;
}}

/* Cards and panels */

QFrame#CenteredCard, QFrame#MainPanel {{
    background: #ffffff;
    border: 1px solid {BORDER};
    border-radius: 16px;
}}

QFrame#Sidebar, QFrame#HeaderBar, QFrame#MetricCard, QFrame#LoginHeader, QFrame#DemoAccounts {{
    background: {PANEL};
    border: 1px solid {BORDER};
    border-radius: 12px;
}}

QLabel#LoginTitle, QLabel#BrandLabel {{
    font-size: 24px;
    font-weight: 700;
    color: #1f5b4a;
    background: transparent;
}}

QLabel#GreetingLabel, QLabel#SectionTitle {{
    font-size: 22px;
    font-weight: 700;
    color: #1a3b33;
}}

QLabel#LoginSubtitle, QLabel#SectionHint, QLabel#MetricTitle, QLabel#DemoLine {{
    color: #56736c;
    background: transparent;
}}

QLabel#DemoTitle, QLabel#SidebarUser {{
    font-weight: 700;
    color: #24493f;
    background: transparent;
}}

QLabel#MetricValue {{
    color: #163a31;
    font-size: 24px;
    font-weight: 700;
}}

QLabel#InfoLabel {{
    color: #8a5a00;
    background: #fff4d8;
    border-radius: 8px;
    padding: 6px 10px;
}}

QLabel#ErrorLabel {{
    color: #c0392b;
}}

/* Navigation */

QPushButton#SidebarNavButton {{
    text-align: left;
    background: transparent;
    color: #3e5e56;
}}

QPushButton#SidebarNavButton:hover {{
    background: #e3f1ec;
}}

QPushButton#SidebarNavButton[active="true"] {{
    background: #cfe9df;
    color: #174c3d;
}}

/* Stock status */

QLabel#StatusBadge {{
    border-radius: 9px;
    padding: 2px 10px;
    font-size: 12px;
    font-weight: 700;
}}

QLabel#StatusBadge[status="NORMAL"] {{ background: #dff5e8; color: #1e7a4b; }}
QLabel#StatusBadge[status="LOW"] {{ background: #fff4d8; color: #8e6500; }}
QLabel#StatusBadge[status="OUT_OF_STOCK"] {{ background: #fde8ea; color: #b6374b; }}

/* Notices */

QFrame#NoticeBanner {{
    border: none;
    border-bottom: 1px solid #cfe2dc;
    background: #eef7f3;
}}

QFrame#NoticeBanner[level="success"] {{ background: #dff5e8; }}
QFrame#NoticeBanner[level="error"] {{ background: #fde8ea; }}
QFrame#NoticeBanner[level="warning"] {{ background: #fff4d8; }}
QFrame#NoticeBanner[level="info"] {{ background: #e5eefc; }}

QLabel#NoticeText, QPushButton#NoticeClose {{
    background: transparent;
    font-weight: 600;
}}

/* Tables and report tabs */

QTableWidget#DataTable {{
    border: 1px solid {BORDER};
    border-radius: 10px;
    background: #ffffff;
    gridline-color: #edf5f2;
}}

QHeaderView::section {{
    background: #eef7f3;
    color: #37574f;
    border: none;
    border-bottom: 1px solid {BORDER};
    padding: 7px 9px;
    font-weight: 600;
}}

QTableWidget::item:selected {{
    background: #d2ebe1;
    color: #163a31;
}}

QTabBar::tab {{
    padding: 8px 14px;
    color: #56736c;
    background: transparent;
}}

QTabBar::tab:selected {{
    color: #163a31;
    font-weight: 700;
    border-bottom: 2px solid {GREEN};
}}
"""
