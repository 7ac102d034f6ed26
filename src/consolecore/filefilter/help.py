"""Help text listing filter operators and attributes."""

from io import StringIO

from rich.console import Console
from rich.table import Table

from ..vt.output import output
from ..vt.terminal import get_window_dimensions
from ..vt.types import OutputFlags
from .catalogue import OPTIONS

OPERATOR_HELP = (
    ("=", "File attribute matches criteria"),
    ("!=", "File attribute does not match criteria"),
    (">", "File attribute greater than criteria"),
    (">=", "File attribute greater than or equal to criteria"),
    ("<", "File attribute less than criteria"),
    ("<=", "File attribute less than or equal to criteria"),
    ("&", "File attribute includes criteria or wildcard string"),
    ("!&", "File attribute does not include criteria or wildcard string"),
)


def _operators_for(option) -> str:
    supported = []
    if option.compare is not None:
        supported.append("=, !=, >, >=, <, <=")
    if option.bitwise_compare is not None:
        supported.append("&, !&")
    return ", ".join(supported)


def filter_help(width: int | None = None) -> str:
    """Render the operator and attribute tables as VT-coloured text."""
    if width is None:
        width, _ = get_window_dimensions()
    console = Console(
        file=StringIO(),
        record=True,
        width=width,
        force_terminal=True,
        color_system="standard",
    )

    operators = Table(title="Valid operators", show_header=True, header_style="bold")
    operators.add_column("Operator", style="cyan")
    operators.add_column("Meaning")
    for token, meaning in OPERATOR_HELP:
        operators.add_row(token, meaning)

    attributes = Table(title="Valid attributes", show_header=True, header_style="bold")
    attributes.add_column("Tag", style="cyan")
    attributes.add_column("Attribute")
    attributes.add_column("Operators", style="green")
    for option in OPTIONS:
        attributes.add_row(option.tag, option.name, _operators_for(option))

    console.print(operators)
    console.print(attributes)
    return console.export_text(styles=True)


def output_filter_help(flags: OutputFlags = OutputFlags.STDOUT) -> bool:
    """Write the help tables through the VT pipeline."""
    return output(flags, "%s", filter_help())
