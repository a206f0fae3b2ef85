#
# HSize Helpers for Exception Messages
#

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Sequence, TypeVar

T = TypeVar('T')

_MAX_REPR = 80


# Methods --------------------------------------------------------------------------------------------------------------

def fmt_type(obj: Any) -> str:
    """
    Type of obj as "<type: name>", obj may itself be a type.

    Examples:
        >>> fmt_type(1.5)
        '<type: float>'
        >>> fmt_type(str)
        '<type: str>'
    """
    cls = obj if isinstance(obj, type) else type(obj)
    return f"<type: {_clip(getattr(cls, '__name__', repr(cls)))}>"


def fmt_value(x: Any) -> str:
    """
    Value of user input as "<type: repr>" for error messages.

    The repr is clipped to a readable length and a ">" inside it is escaped, so the
    closing bracket stays unambiguous. A failing __repr__ never propagates.

    Examples:
        >>> fmt_value(1536)
        '<int: 1536>'
        >>> fmt_value("1 KiB")
        "<str: '1 KiB'>"
    """
    try:
        text = repr(x)
    except Exception as e:
        text = f"{type(x).__name__} object, repr failed: {type(e).__name__}"
    text = text.replace(">", "\\>")
    return f"<{type(x).__name__}: {_clip(text)}>"


def sequence_get(seq: Sequence[T] | None, index: int | None, default: Any = None) -> T | Any:
    """Item at a non-negative index, or default for a missing sequence, index or item."""
    if seq is None or index is None or not 0 <= index < len(seq):
        return default
    return seq[index]


# Private Methods ------------------------------------------------------------------------------------------------------

def _clip(text: str) -> str:
    if len(text) <= _MAX_REPR:
        return text
    # Keep the closing quote of a clipped string repr
    if text[0] in "'\"" and text[-1] == text[0]:
        return f"{text[:_MAX_REPR - 1]}{text[0]}..."
    return f"{text[:_MAX_REPR]}..."
