"""Template Engine — formats derived program figures into markdown.

The review pane of the setup wizard is deterministic text built from a
committed configuration snapshot. Renderers in the loyalty package assemble
ordered "cards" (a title plus bullet lines); this module owns the number
formatting and the markdown layout so every surface formats money, points
and percentages the same way.
"""

from typing import Dict, Iterable, Optional, Sequence

# Display symbols for the currency codes the wizard offers; anything else
# is rendered as a code prefix ("AUD 10.00").
CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "AUD": "$",
    "NZD": "$",
    "CAD": "$",
    "GBP": "£",
    "EUR": "€",
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def currency_symbol(currency: Optional[str]) -> str:
    """Return the display prefix for a currency code."""
    if not currency:
        return "$"
    return CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")


def fmt_money(value: float | int | None, currency: str = "USD") -> str:
    """Format a number as currency."""
    if value is None:
        return "N/A"
    return f"{currency_symbol(currency)}{value:,.2f}"


def fmt_pct(value: float | None, places: int = 1) -> str:
    """Format a float as percentage."""
    if value is None:
        return "N/A"
    return f"{value:.{places}f}%"


def fmt_int(value: int | None) -> str:
    """Format an integer with comma separators."""
    if value is None:
        return "N/A"
    return f"{value:,}"


def fmt_number(value: float | int | None) -> str:
    """Format a rate or multiplier without trailing zeros (9.5, 0.6, 1)."""
    if value is None:
        return "N/A"
    return f"{value:g}"


def fmt_list(values: Iterable[str], empty: str = "—") -> str:
    """Join names for a summary line."""
    joined = ", ".join(v for v in values if v)
    return joined or empty


# ---------------------------------------------------------------------------
# Markdown layout
# ---------------------------------------------------------------------------

def render_card(title: str, lines: Sequence[str]) -> str:
    """Render one summary card as a markdown section with bullets."""
    out = [f"### {title}\n"]
    if not lines:
        out.append("_Nothing configured._")
    for line in lines:
        out.append(f"- {line}")
    return "\n".join(out)


def render_cards(
    heading: str,
    cards: Dict[str, Sequence[str]],
    footer: Optional[Sequence[str]] = None,
) -> str:
    """Render an ordered mapping of cards under a top-level heading."""
    parts = [f"## {heading}"]
    for title, lines in cards.items():
        parts.append(render_card(title, lines))
    if footer:
        parts.append("\n".join(footer))
    return "\n\n".join(parts)
