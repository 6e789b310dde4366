"""Purchase-order intake service.

Turns an uploaded purchase document (image or PDF) into resolved order
lines by way of OCR, line-pattern extraction and inventory mapping lookups.
"""

__version__ = "1.0.0"
