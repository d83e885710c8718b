import os
import re
from typing import Tuple

# Files without a leading number go to the end of their module
DEFAULT_SORT_ORDER = 999

_LEADING_DIGITS = re.compile(r'^(\d+)')


def extract_title(filename: str) -> str:
    """
    Clean display title from a filename.
    Drops the extension and turns underscores into spaces.
    Hyphens and dots are kept since they usually mean something ("01. Intro - Part 2").
    """
    stem, _ = os.path.splitext(filename)
    title = stem.replace('_', ' ').strip()
    return title or filename


def extract_sort_order(name: str) -> int:
    """Leading run of digits as an int ('07 - Setup.mp4' -> 7)"""
    match = _LEADING_DIGITS.match(name)
    return int(match.group(1)) if match else DEFAULT_SORT_ORDER


def parse_filename(filename: str) -> Tuple[str, int]:
    return extract_title(filename), extract_sort_order(filename)


def has_extension(filename: str, extensions) -> bool:
    _, ext = os.path.splitext(filename)
    return ext.lower() in {e.lower() for e in extensions}
