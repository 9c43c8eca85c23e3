"""
Parameter Validator
===================

Turns decoded query parameters into validated RenderParameters.

Malformed values are handled by one of two deployment-wide policies:
best-effort (the key is dropped and a warning logged) or strict (the request
fails with InvalidParameter).
"""

import math
import re
from typing import Mapping, Dict, Any, Optional

from paparazzi.config.logging import get_logger
from paparazzi.models.schemas import NUMERIC_PARAMETERS, RenderParameters
from .exceptions import InvalidParameter

logger = get_logger(__name__)

DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")

DEFAULT_MAX_SCENE_LENGTH = 1024


def parse_number(raw: str) -> Optional[float]:
    """Parse a plain decimal number, returning None if it is not one.

    Accepts forms like ``15``, ``-74.0``, ``.5`` and ``1e3``. Rejects
    ``nan``, ``inf``, hex, digit separators, surrounding whitespace and
    anything that overflows to infinity.
    """
    if not DECIMAL_PATTERN.fullmatch(raw):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


def check_scene(raw: str, max_length: int = DEFAULT_MAX_SCENE_LENGTH) -> Optional[str]:
    """Return the reason a scene token is unacceptable, or None if it is fine."""
    if len(raw) > max_length:
        return f"longer than {max_length} characters"
    if CONTROL_CHARACTERS.search(raw):
        return "contains control characters"
    if raw.startswith("-"):
        return "must not start with '-'"
    return None


def parse_render_parameters(
    query: Mapping[str, str],
    strict: bool = False,
    max_scene_length: int = DEFAULT_MAX_SCENE_LENGTH,
) -> RenderParameters:
    """
    Validate recognized query parameters.

    Args:
        query: Decoded query mapping (last value wins for repeated keys)
        strict: Raise InvalidParameter instead of dropping malformed values
        max_scene_length: Longest accepted scene token

    Returns:
        RenderParameters holding only the accepted keys

    Raises:
        InvalidParameter: If strict and a recognized value is malformed
    """
    accepted: Dict[str, Any] = {}

    def reject(name: str, raw: str, reason: str) -> None:
        if strict:
            raise InvalidParameter(f"Invalid value for '{name}': {reason}", parameter=name)
        logger.warning("Dropping invalid parameter", parameter=name, value=raw[:64], reason=reason)

    for name in NUMERIC_PARAMETERS:
        raw = query.get(name)
        if not raw:
            continue
        value = parse_number(raw)
        if value is None:
            reject(name, raw, "not a finite number")
            continue
        accepted[name] = value

    scene = query.get("scene")
    if scene:
        reason = check_scene(scene, max_scene_length)
        if reason is None:
            accepted["scene"] = scene
        else:
            reject("scene", scene, reason)

    return RenderParameters(**accepted)
