"""Human-readable byte sizes."""

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(size: int) -> str:
    """Format a byte count with binary units and one decimal, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f} {_UNITS[unit]}"
