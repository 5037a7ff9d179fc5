from __future__ import annotations


def norm_name(p: str) -> str:
    """Normalize a filesystem path into a logical asset name.

    Backslashes become forward slashes so archives packed on Windows resolve
    the same names as ones packed elsewhere. Nothing else is rewritten: the
    name is hashed exactly as returned.
    """
    return p.replace("\\", "/")


def display_name(name: str) -> str:
    """Printable form of a name that may carry surrogate-escaped bytes."""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")
