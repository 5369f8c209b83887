from typing import Optional


def to_float(v) -> Optional[float]:
    try:
        if v is None or v == "" or str(v).lower() == "null":
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


def to_str(v, default: str = "") -> str:
    if v is None:
        return default
    text = str(v).strip()
    return text or default
