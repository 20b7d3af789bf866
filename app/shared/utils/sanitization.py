"""Input sanitization for user-entered text (titles, descriptions, comments).

Text is stored as plain text; HTML is stripped with nh3 so it cannot be
rendered as markup by any client. Queries stay parameterized; escape_like
only neutralizes LIKE wildcards in search terms.
"""

import nh3


def sanitize_text(value: str | None) -> str | None:
    """Strip all HTML tags from value and trim surrounding whitespace."""
    if value is None:
        return None
    cleaned = nh3.clean(value, tags=set(), attributes={})
    return cleaned.strip()


def escape_like(term: str, escape_char: str = "\\") -> str:
    """Escape %, _ and the escape character for use in a LIKE pattern."""
    return (
        term.replace(escape_char, escape_char * 2)
        .replace("%", f"{escape_char}%")
        .replace("_", f"{escape_char}_")
    )
