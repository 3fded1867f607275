"""Result rendering."""
from .markdown_report import (
    DISCLAIMER,
    format_currency,
    format_expiration,
    format_percentage,
    format_shares,
    render_markdown,
)

__all__ = [
    'DISCLAIMER', 'format_currency', 'format_expiration', 'format_percentage',
    'format_shares', 'render_markdown',
]
