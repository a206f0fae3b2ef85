#
# HSize Extraction of Byte Sizes from Free Text
#

# Standard library -----------------------------------------------------------------------------------------------------
import math
from dataclasses import dataclass

# Local ----------------------------------------------------------------------------------------------------------------
from .parsing import GLOBAL_BYTE_PATTERN, parse_size


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractedMatch:
    """
    A byte size found in text.

    Attributes:
        value: The number as written, e.g. 1.5 for "1.5 GB".
        unit: The unit as written, e.g. "GB".
        bytes: The size in bytes.
        input: The matched text, equal to source[start:end].
        start: Start offset in the source text.
        end: End offset in the source text, exclusive.
    """
    value: float
    unit: str
    bytes: float
    input: str
    start: int
    end: int


# Methods --------------------------------------------------------------------------------------------------------------

def extract_sizes(text: str) -> list[ExtractedMatch]:
    """
    Find every byte size in a text, left to right.

    Each match is parsed with default options (ambiguous units are 1024-based, a comma
    is a decimal point). Matches whose number or byte count is not finite are dropped.
    Never raises: non-str input and text without sizes give an empty list.

    Examples:
        >>> [m.bytes for m in extract_sizes("My 16GB drive has 4GB free")]
        [17179869184.0, 4294967296.0]
        >>> m = extract_sizes("Size: 1 KiB")[0]
        >>> (m.input, m.start, m.end)
        ('1 KiB', 6, 11)
    """
    if not isinstance(text, str):
        return []

    results = []
    for match in GLOBAL_BYTE_PATTERN.finditer(text):
        value = float(match["value"].replace(",", ".", 1))
        size = parse_size(match.group(0))
        if not (math.isfinite(value) and math.isfinite(size)):
            continue
        results.append(ExtractedMatch(
            value=value,
            unit=match["unit"],
            bytes=size,
            input=match.group(0),
            start=match.start(),
            end=match.end(),
        ))
    return results
