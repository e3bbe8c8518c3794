"""Common utility functions."""


def format_bytes(size: int) -> str:
    """
    Format a byte count for display.

    Args:
        size: Number of bytes.

    Returns:
        Size with a binary unit, e.g. ``"1.5 KB"``.
    """
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    index = 0
    value = float(size)
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"

