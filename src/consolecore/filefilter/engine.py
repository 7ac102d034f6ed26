"""Compile and evaluate file filter and colour rule expressions.

A filter expression is a ``;`` separated list of elements such as
``fs>=1k;fe=txt``. A colour expression adds a colour to each element:
``fe=exe,lightgreen;fa&D,lightblue``. Compilation resolves every element
to a collector, a comparator, a truth table and a parsed value, so
evaluation against each file only collects and compares.
"""

from dataclasses import dataclass

from ..color import (
    TERMINATE_MASK,
    WINDOW_BITS,
    AttrCtrl,
    ColorAttributes,
    attribute_from_string,
    combine_colors,
    resolve_window_color_components,
    swap_nibbles,
)
from ..errors import ConsoleCoreError, ErrorKind, FilterCompileError
from ..fs import FileRecord
from ..telemetry import get_logger, metrics
from ..vt.defaults import get_default_color
from .catalogue import FilterOption, find_option
from .collectors import Collector
from .compare import Comparator, CompareResult
from .info import CollectedInfo

logger = get_logger(__name__)

OPERATOR_CHARS = "&<>=!"

_LT, _EQ, _GT, _NEQ = (
    CompareResult.LESS_THAN,
    CompareResult.EQUAL,
    CompareResult.GREATER_THAN,
    CompareResult.NOT_EQUAL,
)

# operator -> (uses bitwise comparator, truth table)
OPERATORS: dict[str, tuple[bool, dict[CompareResult, bool]]] = {
    "=": (False, {_LT: False, _EQ: True, _GT: False}),
    "!=": (False, {_LT: True, _EQ: False, _GT: True}),
    ">": (False, {_LT: False, _EQ: False, _GT: True}),
    ">=": (False, {_LT: False, _EQ: True, _GT: True}),
    "<": (False, {_LT: True, _EQ: False, _GT: False}),
    "<=": (False, {_LT: True, _EQ: True, _GT: False}),
    "&": (True, {_EQ: True, _NEQ: False}),
    "!&": (True, {_EQ: False, _NEQ: True}),
}


@dataclass
class FilterCriterion:
    """One compiled element.

    ``collect`` is None when an earlier element already fills the same
    fields; evaluation then compares against what that one collected.
    """

    option: FilterOption
    operator: str
    collect: Collector | None
    compare: Comparator
    truth_table: dict[CompareResult, bool]
    value: CollectedInfo
    span: tuple[int, int]

    def matches(self, collected: CollectedInfo) -> bool:
        return self.truth_table[self.compare(collected, self.value)]


@dataclass
class ColorCriterion(FilterCriterion):
    color: ColorAttributes = ColorAttributes()


def _trimmed(expression: str, start: int, end: int) -> tuple[int, int]:
    while start < end and expression[start] in " \t":
        start += 1
    while end > start and expression[end - 1] in " \t":
        end -= 1
    return start, end


def _element_spans(expression: str) -> list[tuple[int, int]]:
    """Offsets of the non-empty, trimmed elements between ``;``."""
    spans = []
    start = 0
    while True:
        separator = expression.find(";", start)
        stop = len(expression) if separator < 0 else separator
        begin, end = _trimmed(expression, start, stop)
        if end > begin:
            spans.append((begin, end))
        if separator < 0:
            return spans
        start = separator + 1


class FileFilter:
    """A compiled filter or colour expression.

    Example:
        file_filter = FileFilter()
        file_filter.compile_filter("fs>=1k;fe=txt")
        keep = file_filter.eval_filter(path, record)
    """

    def __init__(self):
        self.criteria: list[FilterCriterion] = []
        self.is_color = False

    def __len__(self) -> int:
        return len(self.criteria)

    def compile_filter(self, expression: str) -> None:
        """Replace the criteria with those of a filter expression.

        Raises:
            FilterCompileError: an element names an unknown attribute, an
                operator the attribute does not support, or a bad value
        """
        self._compile(expression, color=False)

    def compile_color(self, expression: str) -> None:
        """Replace the criteria with those of a colour expression.

        Raises:
            FilterCompileError: as compile_filter, or an element has no
                colour or an unknown one
        """
        self._compile(expression, color=True)

    def free(self) -> None:
        self.criteria = []

    def _compile(self, expression: str, color: bool) -> None:
        spans = _element_spans(expression)
        criteria: list[FilterCriterion | None] = [None] * len(spans)
        for index, span in enumerate(spans):
            criterion = self._parse_element(expression, span, color)
            if criterion.collect is not None:
                for previous in criteria[:index]:
                    if previous.collect == criterion.collect:
                        criterion.collect = None
                        break
            criteria[index] = criterion
        self.criteria = criteria
        self.is_color = color
        metrics.inc("filter.compiled", {"kind": "color" if color else "filter"})
        logger.debug(f"Compiled {len(criteria)} criteria from {expression!r}")

    @staticmethod
    def _fail(message: str, kind: ErrorKind, expression: str, span: tuple[int, int]) -> FilterCompileError:
        return FilterCompileError(message, kind, expression, span)

    def _parse_element(self, expression: str, span: tuple[int, int], color: bool) -> FilterCriterion:
        start, end = span
        operator_start = start
        while operator_start < end and expression[operator_start] not in OPERATOR_CHARS:
            operator_start += 1
        tag_span = _trimmed(expression, start, operator_start)
        option = find_option(expression[tag_span[0]:tag_span[1]])
        if option is None:
            raise self._fail("Unknown attribute", ErrorKind.BAD_ATTRIBUTE, expression, tag_span)

        operator_end = operator_start
        while operator_end < end and expression[operator_end] in OPERATOR_CHARS:
            operator_end += 1
        operator = expression[operator_start:operator_end]
        if not operator:
            raise self._fail("Missing operator", ErrorKind.BAD_OPERATOR, expression, span)
        if operator not in OPERATORS:
            raise self._fail("Unknown operator", ErrorKind.BAD_OPERATOR, expression, (operator_start, operator_end))
        use_bitwise, truth_table = OPERATORS[operator]
        compare = option.bitwise_compare if use_bitwise else option.compare
        if compare is None:
            raise self._fail(
                f"Operator {operator} not supported by {option.tag}",
                ErrorKind.BAD_OPERATOR,
                expression,
                (operator_start, operator_end),
            )

        value_end = end
        color_attr = None
        if color:
            comma = expression.find(",", operator_end, end)
            if comma < 0:
                raise self._fail("Missing colour", ErrorKind.BAD_VALUE, expression, span)
            value_end = comma
            color_span = _trimmed(expression, comma + 1, end)
            if color_span[0] == color_span[1]:
                raise self._fail("Missing colour", ErrorKind.BAD_VALUE, expression, span)
            color_attr = attribute_from_string(expression[color_span[0]:color_span[1]])
            if color_attr is None:
                raise self._fail("Unknown colour", ErrorKind.BAD_VALUE, expression, color_span)

        value_span = _trimmed(expression, operator_end, value_end)
        value = CollectedInfo()
        if not option.generate(value, expression[value_span[0]:value_span[1]]):
            raise self._fail(
                f"Invalid value for {option.tag}",
                ErrorKind.BAD_VALUE,
                expression,
                value_span if value_span[0] < value_span[1] else span,
            )

        fields = dict(
            option=option,
            operator=operator,
            collect=option.collect,
            compare=compare,
            truth_table=truth_table,
            value=value,
            span=span,
        )
        if color:
            return ColorCriterion(color=color_attr, **fields)
        return FilterCriterion(**fields)

    def _collect(self, criterion: FilterCriterion, info: CollectedInfo, record: FileRecord, path: str) -> bool:
        try:
            if criterion.collect(info, record, path):
                return True
            error = "collector returned failure"
        except (ConsoleCoreError, OSError) as e:
            error = str(e)
        logger.warning(f"Collecting {criterion.option.name} for {path} failed: {error}")
        metrics.inc("filter.collector_failed", {"tag": criterion.option.tag})
        return False

    def eval_filter(self, path: str | None, record: FileRecord) -> bool:
        """True when the file satisfies every criterion."""
        if not self.criteria:
            return True
        path = path if path is not None else record.path or record.name
        info = CollectedInfo()
        for criterion in self.criteria:
            if criterion.collect is not None and not self._collect(criterion, info, record, path):
                return False
            if not criterion.matches(info):
                return False
        return True

    def eval_color(self, path: str | None, record: FileRecord) -> ColorAttributes | None:
        """Colour for the file, or None when an attribute could not be collected.

        Matching rules are combined in order until one without ``continue``
        matches. With no decisive match the default colour is returned,
        unless continued rules left an explicit colour behind.
        """
        path = path if path is not None else record.path or record.name
        info = CollectedInfo()
        current = ColorAttributes(WINDOW_BITS, 0)
        previous = ColorAttributes(WINDOW_BITS, get_default_color())

        for criterion in self.criteria:
            if criterion.collect is not None and not self._collect(criterion, info, record, path):
                return None
            if not criterion.matches(info):
                continue
            current = combine_colors(current, criterion.color)
            if not current.ctrl & AttrCtrl.CONTINUE:
                current = resolve_window_color_components(current, previous, True)
                if current.ctrl & AttrCtrl.INVERT:
                    current = ColorAttributes(
                        AttrCtrl(current.ctrl & ~AttrCtrl.INVERT), swap_nibbles(current.win32_attr)
                    )
                return current
            current = ColorAttributes(AttrCtrl(current.ctrl & ~AttrCtrl.CONTINUE), current.win32_attr)

        if current.ctrl & TERMINATE_MASK or current.win32_attr != 0:
            return current
        return previous


def filter_compile_filter(file_filter: FileFilter, expression: str) -> str | None:
    """Compile a filter expression; returns the offending text on failure, else None."""
    try:
        file_filter.compile_filter(expression)
    except FilterCompileError as e:
        logger.debug(f"Filter {expression!r} rejected at {e.span}: {e}")
        return e.substring
    return None


def filter_compile_color(file_filter: FileFilter, expression: str) -> str | None:
    """Compile a colour expression; returns the offending text on failure, else None."""
    try:
        file_filter.compile_color(expression)
    except FilterCompileError as e:
        logger.debug(f"Colour rules {expression!r} rejected at {e.span}: {e}")
        return e.substring
    return None


def filter_eval_filter(file_filter: FileFilter, path: str | None, record: FileRecord) -> bool:
    return file_filter.eval_filter(path, record)


def filter_eval_color(file_filter: FileFilter, path: str | None, record: FileRecord) -> ColorAttributes | None:
    return file_filter.eval_color(path, record)


def filter_free(file_filter: FileFilter) -> None:
    file_filter.free()
