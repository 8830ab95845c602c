"""Reference string sources: whitespace-separated files and a random generator"""

import random
from typing import List, Optional, Sequence, Tuple

from virtualsim import (
    MAX_PAGE_RANGE,
    MAX_REFERENCES,
    InvalidLength,
    InvalidRange,
    InvalidReference,
    SequenceTooLong,
    UnreadableInput,
    UnwritableOutput,
)


def parse_reference_string(text: str, max_references: int = MAX_REFERENCES) -> Tuple[int, ...]:
    """Parse whitespace-separated page numbers"""
    pages = []
    for token in text.split():
        try:
            page_num = int(token)
        except ValueError:
            raise InvalidReference(f"Not a page number: {token!r}") from None
        if page_num < 0:
            raise InvalidReference(f"Page numbers must be non-negative, got {page_num}")
        pages.append(page_num)
        if len(pages) > max_references:
            raise SequenceTooLong(
                f"Maximum number of page references ({max_references}) exceeded")
    return tuple(pages)


def load_reference_string(path: str, max_references: int = MAX_REFERENCES) -> Tuple[int, ...]:
    try:
        with open(path) as f:
            text = f.read()
    except OSError as e:
        raise UnreadableInput(f"Unable to open file {path}: {e.strerror}") from e
    return parse_reference_string(text, max_references)


def save_reference_string(path: str, reference_string: Sequence[int]):
    # Render everything first so a failed open leaves nothing half-written
    text = "".join(f"{page_num} " for page_num in reference_string)
    try:
        with open(path, "w") as f:
            f.write(text)
    except OSError as e:
        raise UnwritableOutput(f"Unable to open file {path}: {e.strerror}") from e


def generate_reference_string(page_range: int, length: int,
                              seed: Optional[int] = None) -> List[int]:
    """
    Generate length page numbers in [0, page_range) where no page
    immediately repeats the one before it
    """
    if page_range < 1 or page_range > MAX_PAGE_RANGE:
        raise InvalidRange(f"Range must be between 1 and {MAX_PAGE_RANGE}, got {page_range}")
    if length < 0:
        raise InvalidLength(f"Length must be non-negative, got {length}")
    if page_range == 1 and length > 1:
        raise InvalidRange("Range 1 cannot produce a sequence without repeated pages")

    rng = random.Random(seed)
    reference_string = []
    prev_page = None
    for _ in range(length):
        page = rng.randrange(page_range)
        while page == prev_page:
            page = rng.randrange(page_range)
        reference_string.append(page)
        prev_page = page
    return reference_string
