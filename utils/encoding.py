"""Encoding detection utilities"""

from pathlib import Path

import chardet


def detect_encoding(file_path: Path) -> str:
    """
    Detect file encoding with fallback support

    Args:
        file_path: Path to file

    Returns:
        Detected encoding string
    """
    with open(file_path, 'rb') as f:
        raw_sample = f.read(8192)

    # Check for BOM
    if raw_sample.startswith(b'\xef\xbb\xbf'):
        return 'utf-8-sig'

    result = chardet.detect(raw_sample)
    if result['encoding'] and result['confidence'] > 0.7:
        return result['encoding']

    # Fallback: try common encodings
    for encoding in ['utf-8', 'cp1252', 'latin-1']:
        try:
            raw_sample.decode(encoding)
            return encoding
        except (UnicodeDecodeError, LookupError):
            continue

    # Final fallback
    return 'latin-1'
