"""
Front matter extraction for markdown documents.

Parses YAML front matter (between --- delimiters) from .md files.

Supported value types:
  - datetime   2026-02-07T14:04:00  → ISO string
  - date       2026-02-13           → ISO string
  - number     987                  → int / float
  - list       [a, b, c]            → list
  - bool       true / false         → bool
  - text       any string           → str
"""

import logging
import re
from datetime import date, datetime

import yaml

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?",
    re.DOTALL | re.MULTILINE,
)


def extract_frontmatter(text: str, source: str = "<string>") -> tuple[dict, str]:
    """Split leading YAML front matter from markdown body.

    Returns:
        (metadata_dict, body_without_frontmatter)
        If no front matter is found, returns ({}, original_text).
        The body is stripped of surrounding whitespace once front matter
        has been removed.
    """
    m = _FRONTMATTER_RE.match(text)
    if m is None:
        return {}, text

    raw_yaml = m.group(1)
    body = text[m.end():].strip()

    try:
        parsed = yaml.safe_load(raw_yaml)
    except yaml.YAMLError as exc:
        # Malformed YAML → treat as no front matter
        logger.warning("Ignoring malformed front matter in %s: %s", source, exc)
        return {}, text

    if parsed is None:
        return {}, body
    if not isinstance(parsed, dict):
        logger.warning("Ignoring non-mapping front matter in %s", source)
        return {}, text

    return _normalise_values(parsed), body


def _normalise_values(data: dict) -> dict:
    """Convert date/datetime objects to ISO strings and keys to str."""
    return {str(key): _normalise(value) for key, value in data.items()}


def _normalise(value):
    """Recursively normalise a single value."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return [_normalise(v) for v in value]
    if isinstance(value, dict):
        return _normalise_values(value)
    # int, float, bool, str, None
    return value
