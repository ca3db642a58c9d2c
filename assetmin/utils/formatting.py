"""
Human readable formatting helpers for task output.
"""


def format_bytes(size: int, precision: int = 2) -> str:
    """
    Format a byte count with a binary unit suffix.

    Args:
        size: Number of bytes
        precision: Decimal places for sizes of 1 KB and above

    Returns:
        str: e.g. ``"512 B"`` or ``"1.5 KB"``
    """
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(max(size, 0))
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1

    if index == 0:
        return f"{int(value)} B"
    return f"{round(value, precision):g} {units[index]}"
