from typing import Any, Dict, Optional


def drop_none(options: Dict[str, Any]) -> Dict[str, Any]:
    """Remove keys whose value is ``None`` so they do not shadow defaults."""
    return {key: value for key, value in options.items() if value is not None}


def merge_defined(base: Optional[Dict[str, Any]], overrides: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Shallow-merges two option dicts, ``overrides`` winning key by key.

    Returns None when both sides are missing, so callers can tell "nothing
    configured" apart from "configured as empty".
    """
    if base is None and overrides is None:
        return None
    return {**(base or {}), **(overrides or {})}


def merge_options(computed: Dict[str, Any], passthrough: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Applies a user-supplied pass-through option bag over computed options.

    Args:
        computed: Options derived from styles.
        passthrough: Raw serializer options supplied by the caller.

    Returns:
        A new dict; neither input is modified.
    """
    merged = dict(computed)
    if not passthrough:
        return merged

    for key, value in passthrough.items():
        merged[key] = value
    return merged
