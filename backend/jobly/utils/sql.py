"""Builders for parameterized SQL fragments.

Route handlers and services receive partial data (a PATCH body, a set of
query-string filters) and need a ``SET`` or ``WHERE`` clause covering only
the fields that were actually provided. The helpers here turn such a
mapping into a :class:`SqlFragment`: clause text using Postgres-style
``$1..$n`` placeholders plus the bind values in placeholder order.

The builders are pure. They never modify the mapping they are given.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from ..errors import BadRequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SqlFragment:
    """Clause text plus its positional bind values.

    Attributes:
        clause: Assignments joined by ``", "`` or predicates joined by ``" AND "``.
        values: Bind values; ``values[i]`` belongs to placeholder ``$(i + 1)``.
    """

    clause: str
    values: list[Any] = field(default_factory=list)


def sql_for_partial_update(data: Mapping[str, Any] | None, js_to_sql: Mapping[str, str] | None = None) -> SqlFragment:
    """Prepare a ``SET`` clause for a partial update.

    Only the fields present in ``data`` are changed. ``js_to_sql`` maps API
    field names to column names; fields without an entry keep their name.

        >>> frag = sql_for_partial_update({"firstName": "Aliya", "age": 32}, {"firstName": "first_name"})
        >>> frag.clause
        '"first_name"=$1, "age"=$2'
        >>> frag.values
        ['Aliya', 32]

    Raises:
        BadRequestError: ``data`` is missing, not a mapping, or empty.
    """
    if not isinstance(data, Mapping) or not data:
        raise BadRequestError("No data")

    js_to_sql = js_to_sql or {}
    cols = [f'"{js_to_sql.get(name) or name}"=${idx}' for idx, name in enumerate(data, start=1)]

    fragment = SqlFragment(", ".join(cols), list(data.values()))
    logger.debug("partial update: SET %s", fragment.clause)
    return fragment


# =============================================================================
# Filter fields
# =============================================================================


def _contains(value: Any) -> str:
    return f"%{value}%"


def _is_blank(value: Any) -> bool:
    return not value or (isinstance(value, str) and not value.strip())


def _to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value

    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        raise ValueError("must be a number") from None
    if not math.isfinite(number):
        raise ValueError("must be a number")
    return number


@dataclass(frozen=True, slots=True)
class FilterField:
    """One recognized filter.

    A field either binds a value (``predicate`` holds an ``{idx}`` slot for
    the placeholder number and ``transform`` shapes the raw value) or picks
    a fixed predicate from ``choices`` keyed by the exact raw string,
    binding nothing. Blank values, and values missing from ``choices``,
    are dropped.
    """

    name: str
    predicate: str = ""
    transform: Callable[[Any], Any] | None = None
    choices: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """A set of filters accepted together.

    With ``strict`` set, unknown keys and an empty result are rejected.
    """

    fields: tuple[FilterField, ...]
    strict: bool = True

    @property
    def allowed(self) -> str:
        return ", ".join(f.name for f in self.fields)


_NAME_LIKE = FilterField("nameLike", "name ILIKE ${idx}", _contains)
_MIN_EMPLOYEES = FilterField("minEmployees", "num_employees>=${idx}", _to_number)
_MAX_EMPLOYEES = FilterField("maxEmployees", "num_employees<=${idx}", _to_number)

COMPANY_FILTERS = FilterSpec((_MIN_EMPLOYEES, _MAX_EMPLOYEES, _NAME_LIKE))

JOB_FILTERS = FilterSpec(
    (
        FilterField("title", "title ILIKE ${idx}", _contains),
        FilterField("minSalary", "salary>=${idx}", _to_number),
        FilterField(
            "hasEquity",
            choices={
                "true": "equity > 0",
                "false": "(equity = 0 OR equity ISNULL)",
            },
        ),
    )
)

GENERIC_FILTERS = FilterSpec((_NAME_LIKE, _MIN_EMPLOYEES, _MAX_EMPLOYEES), strict=False)


def build_filter_fragment(filters: Mapping[str, Any] | None, spec: FilterSpec) -> SqlFragment:
    """Prepare a ``WHERE`` clause from the filters in ``filters``.

    Predicates follow the iteration order of ``filters``. Placeholders are
    numbered only for predicates that bind a value.

    Raises:
        BadRequestError: unknown filter or no usable filter (strict specs
            only), or a value that fails its transform.
    """
    if filters is None:
        filters = {}
    if not isinstance(filters, Mapping):
        raise BadRequestError(f"Filters must be an object with any of: {spec.allowed}")

    by_name = {f.name: f for f in spec.fields}

    if spec.strict and any(name not in by_name for name in filters):
        raise BadRequestError(f"Filter does not match allowed methods: {spec.allowed}")

    predicates: list[str] = []
    values: list[Any] = []

    for name, raw in filters.items():
        flt = by_name.get(name)
        if flt is None or _is_blank(raw):
            continue

        if flt.choices is not None:
            predicate = flt.choices.get(raw) if isinstance(raw, str) else None
            if predicate:
                predicates.append(predicate)
            continue

        try:
            value = flt.transform(raw) if flt.transform else raw
        except ValueError as exc:
            raise BadRequestError(f"{name} {exc}") from exc

        values.append(value)
        predicates.append(flt.predicate.format(idx=len(values)))

    if spec.strict and not predicates:
        raise BadRequestError(f"Must use at least one filter: {spec.allowed}")

    fragment = SqlFragment(" AND ".join(predicates), values)
    logger.debug("partial filter: WHERE %s", fragment.clause)
    return fragment


def sql_for_partial_filter(filters: Mapping[str, Any] | None) -> SqlFragment:
    """Company-style filter that ignores unknown keys and may come back empty."""
    return build_filter_fragment(filters, GENERIC_FILTERS)


def sql_for_company_partial_filter(filters: Mapping[str, Any] | None) -> SqlFragment:
    return build_filter_fragment(filters, COMPANY_FILTERS)


def sql_for_job_partial_filter(filters: Mapping[str, Any] | None) -> SqlFragment:
    return build_filter_fragment(filters, JOB_FILTERS)
