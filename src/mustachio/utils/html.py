"""String escaping helpers.

All escapers are single-pass ``str.translate()`` calls over precomputed
tables, except :func:`url_escape`, which delegates to ``urllib.parse``.
"""

from __future__ import annotations

from urllib.parse import quote

_HTML_ESCAPE_TABLE = str.maketrans(
    {
        "<": "&lt;",
        ">": "&gt;",
        "&": "&amp;",
        "'": "&apos;",
        '"': "&quot;",
    }
)

_JAVASCRIPT_ESCAPE_TABLE = str.maketrans(
    {
        **{chr(i): f"\\u{i:04X}" for i in range(0x20)},
        "\\": "\\u005C",
        "'": "\\u0027",
        '"': "\\u0022",
        ">": "\\u003E",
        "<": "\\u003C",
        "&": "\\u0026",
        "=": "\\u003D",
        "-": "\\u002D",
        ";": "\\u003B",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

# RFC 3986 query characters, minus the ones that split query parameters.
_URL_SAFE = "!$'()*+,;:@/-._~"


def html_escape(value: str) -> str:
    """Escape ``< > & ' "`` for inclusion in HTML.

    Example:
        >>> html_escape("<a href='x'>&</a>")
        '&lt;a href=&apos;x&apos;&gt;&amp;&lt;/a&gt;'
    """
    return value.translate(_HTML_ESCAPE_TABLE)


def url_escape(value: str) -> str:
    """Percent-encode a string for use as a URL query parameter value.

    ``?``, ``&`` and ``=`` are encoded.

    Example:
        >>> url_escape("a b&c=d")
        'a%20b%26c%3Dd'
    """
    return quote(value, safe=_URL_SAFE)


def javascript_escape(value: str) -> str:
    """Escape a string for inclusion in a JavaScript string literal.

    Control characters, quotes, ``< > & = - ;``, backslashes and the
    U+2028/U+2029 line terminators become ``\\uXXXX`` sequences.
    """
    return value.translate(_JAVASCRIPT_ESCAPE_TABLE)
