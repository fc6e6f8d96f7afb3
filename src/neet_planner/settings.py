"""User settings stored in the user_settings table."""
from neet_planner.db import get_connection

THEMES = ("light", "dark")
DEFAULT_THEME = "dark"


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def get_theme(db_path: str) -> str:
    theme = get_setting(db_path, "theme", DEFAULT_THEME)
    return theme if theme in THEMES else DEFAULT_THEME


def set_theme(db_path: str, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme!r} (expected one of {', '.join(THEMES)})")
    set_setting(db_path, "theme", theme)


def toggle_theme(db_path: str) -> str:
    """Switch between light and dark, returning the new theme."""
    new_theme = "light" if get_theme(db_path) == "dark" else "dark"
    set_setting(db_path, "theme", new_theme)
    return new_theme
