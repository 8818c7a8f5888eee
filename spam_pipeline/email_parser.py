"""
Header/body splitting for raw corpus emails.

Only the outer boundary is located: everything before the first blank line is
treated as headers, everything after it as the body. MIME structure is not
parsed.
"""
import logging
from pathlib import Path
from typing import List, Union

from spam_pipeline.models import HEADER_BODY_SEPARATOR, ParsedEmail, RawEmail

logger = logging.getLogger(__name__)


def normalize_encoding(raw: Union[bytes, str]) -> str:
    """Decode to UTF-8 text, dropping anything that does not decode."""
    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="ignore")
    return raw.decode("utf-8", errors="ignore")


def get_parts(raw: Union[bytes, str]) -> List[str]:
    """
    Split an email at the first blank line.

    Returns [headers, body], or a single-element list when the text has no
    blank line. Callers must tolerate the missing body.
    """
    text = normalize_encoding(raw)
    return text.split(HEADER_BODY_SEPARATOR, 1)


def parse_email(raw: Union[bytes, str], label: str) -> ParsedEmail:
    parts = get_parts(raw)
    body = parts[1] if len(parts) > 1 else None
    return ParsedEmail(headers=parts[0], body=body, label=label)


def read_email(path: Path, label: str) -> RawEmail:
    with open(path, "rb") as f:
        content = f.read()
    return RawEmail(path=path, content=content, label=label)
