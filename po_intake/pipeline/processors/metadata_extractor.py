"""
Best-effort document header fields pulled from OCR text.

Each line field takes the first line that matches; email and phone are
searched across the whole text. Missing fields are absent from the result.
"""

import re
from typing import Any, Callable, Optional

PO_NUMBER_RE = re.compile(r"p\.?o\.?\s*#?\s*:?\s*(\w+[-\d]+)", re.IGNORECASE)
DATE_RE = re.compile(r"date:?\s*(\d{1,2}[-/]\d{1,2}[-/]\d{2,4})", re.IGNORECASE)
INVOICE_NUMBER_RE = re.compile(r"inv(?:oice)?\.?\s*#?\s*:?\s*(\w+[-\d]+)", re.IGNORECASE)
TOTAL_RE = re.compile(r"total:?\s*\$?\s*([\d,.]+)", re.IGNORECASE)
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?:\+\d{1,2}\s?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")


def _parse_amount(raw: str) -> Optional[float]:
    cleaned = raw.replace(",", "").rstrip(".")
    try:
        return float(cleaned)
    except ValueError:
        return None


LINE_FIELDS: list[tuple[str, re.Pattern, Callable[[str], Any]]] = [
    ("poNumber", PO_NUMBER_RE, str),
    ("orderDate", DATE_RE, str),
    ("invoiceNumber", INVOICE_NUMBER_RE, str),
    ("totalAmount", TOTAL_RE, _parse_amount),
]


def extract_document_metadata(text: str) -> dict[str, Any]:
    """Return camelCase header fields found in `text`; never raises."""
    text = text or ""
    metadata: dict[str, Any] = {}

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        for name, regex, convert in LINE_FIELDS:
            if name in metadata:
                continue
            m = regex.search(line)
            if m is None:
                continue
            value = convert(m.group(1))
            if value is not None:
                metadata[name] = value

    email = EMAIL_RE.search(text)
    if email:
        metadata["email"] = email.group(0)
    phone = PHONE_RE.search(text)
    if phone:
        metadata["phone"] = phone.group(0)

    return metadata
