"""
Text Utilities

Helper functions for whitespace, quote and domain cleanup shared by the
registry parser, the normalizer and the vendor matchers.
"""

import re
from typing import Optional
from urllib.parse import urlparse

# Straight and typographic double/single quotes plus Latvian-style low quotes
QUOTE_CHARS = "\"'“”„‘’«»"

_QUOTE_RE = re.compile(f"[{QUOTE_CHARS}]")

# Dotted hostname; labels may hold non-ASCII letters (rīga.lv)
_HOST_RE = re.compile(r"^[\w-]+(?:\.[\w-]+)+$")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) to single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def join_lines(text: str) -> str:
    """Trim each line of a multi-line cell and join them with single spaces."""
    if not text:
        return ""
    lines = (line.strip() for line in text.splitlines())
    return collapse_whitespace(" ".join(line for line in lines if line))


def strip_quotes(text: str) -> str:
    """Remove every quote character and tidy the remaining whitespace."""
    if not text:
        return ""
    return collapse_whitespace(_QUOTE_RE.sub("", text))


def normalize_domain(url: Optional[str]) -> Optional[str]:
    """
    Lower-case hostname without a leading 'www.'.

    Accepts bare hosts ("acme.lv") as well as full URLs. Placeholders such as
    "N/A" or single-label hosts are not domains.

    Returns:
        Normalized host, or None if nothing host-like can be found
    """
    if not url or not url.strip():
        return None
    candidate = url.strip()
    if "://" not in candidate:
        candidate = "http://" + candidate
    try:
        host = urlparse(candidate).hostname
    except ValueError:
        return None
    if not host or not _HOST_RE.match(host):
        return None
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None
