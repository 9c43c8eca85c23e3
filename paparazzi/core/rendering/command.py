"""
Command Builder
===============

Builds the renderer argument vector from validated parameters. The result is
handed to the process launcher as a list, never joined into a shell string.
"""

from pathlib import Path
from typing import List, Sequence, Union

from paparazzi.models.schemas import OUTPUT_FLAG, PARAMETER_FLAGS, RenderCommand, RenderParameters

_FLAGS = dict(PARAMETER_FLAGS)


def format_value(value: Union[float, str]) -> str:
    """Render a parameter value as a locale-independent token."""
    if isinstance(value, str):
        return value
    value = float(value)
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def build_render_command(
    parameters: RenderParameters,
    executable: str,
    output_path: Path,
    prefix: Sequence[str] = (),
) -> RenderCommand:
    """
    Assemble the renderer invocation.

    Args:
        parameters: Validated render parameters
        executable: Renderer executable path
        output_path: File the renderer should write
        prefix: Environment tokens placed before the executable

    Returns:
        RenderCommand with flags in canonical order followed by ``-o``
    """
    argv: List[str] = [*prefix, executable]
    for name, value in parameters.present():
        argv.extend((_FLAGS[name], format_value(value)))
    argv.extend((OUTPUT_FLAG, str(output_path)))
    return RenderCommand(argv=tuple(argv), output_path=output_path)
