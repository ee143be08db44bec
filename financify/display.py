"""
HTML snippets for the Streamlit panels.

Text that comes from the AI or from an error message is escaped before
it is placed inside markup rendered with `unsafe_allow_html`.
"""

from html import escape
from typing import Optional


def message_box(title: str, text: str, css_class: str = "info-box") -> str:
    """A titled panel; `text` line breaks are kept."""
    body = escape(text).replace("\n", "<br>")
    return (
        f'<div class="{escape(css_class, quote=True)}">'
        f"<h4>{escape(title)}</h4>"
        f"<p>{body}</p>"
        "</div>"
    )


def big_number(text: str, color: Optional[str] = None) -> str:
    style = f' style="color:{escape(color, quote=True)}"' if color else ""
    return f'<p class="big-number"{style}>{escape(text)}</p>'
