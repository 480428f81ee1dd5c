"""
Base executor interface.

Any callable ``(statement, params) -> affected_rows`` can be used as an
executor; the classes in this package are ready-made implementations for
common database access layers.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence, Tuple, Union

PARAMSTYLES = ("qmark", "format", "numeric", "named", "pyformat")


class StatementExecutor(ABC):
    """
    Base class for executors.

    Subclasses run one parameterized statement with ``?`` placeholders and
    return the number of affected rows. Instances are callable, so they can be
    handed to the compositor directly.
    """

    @abstractmethod
    def execute(self, statement: str, params: Sequence[Any]) -> int:
        """
        Execute a parameterized statement.

        Args:
            statement: SQL statement using ``?`` placeholders
            params: Positional parameters, one per placeholder

        Returns:
            Number of affected rows
        """
        pass

    def __call__(self, statement: str, params: Sequence[Any]) -> int:
        return self.execute(statement, params)


def convert_placeholders(
    statement: str,
    params: Sequence[Any],
    paramstyle: str
) -> Tuple[str, Union[Tuple[Any, ...], Dict[str, Any]]]:
    """
    Rewrite ``?`` placeholders for a DB-API parameter style.

    Placeholders inside backtick-quoted identifiers are left alone. For the
    ``format`` and ``pyformat`` styles literal percent signs are doubled.

    Args:
        statement: SQL statement using ``?`` placeholders
        params: Positional parameters
        paramstyle: Target DB-API paramstyle

    Returns:
        Tuple of (statement, parameters) where parameters is a tuple for
        positional styles and a dict keyed ``p1``, ``p2``... for named styles

    Raises:
        ValueError: If the paramstyle is unknown
    """
    if paramstyle not in PARAMSTYLES:
        raise ValueError(
            f"Unsupported paramstyle: {paramstyle}. "
            f"Valid values are: {', '.join(PARAMSTYLES)}"
        )
    if paramstyle == "qmark":
        return statement, tuple(params)

    escape_percent = paramstyle in ("format", "pyformat")
    parts = []
    index = 0
    quoted = False
    for char in statement:
        if char == "`":
            quoted = not quoted
        elif char == "%" and escape_percent:
            char = "%%"
        elif char == "?" and not quoted:
            index += 1
            char = _marker(paramstyle, index)
        parts.append(char)

    if paramstyle in ("named", "pyformat"):
        return "".join(parts), {f"p{i}": value for i, value in enumerate(params, start=1)}
    return "".join(parts), tuple(params)


def _marker(paramstyle: str, index: int) -> str:
    if paramstyle == "format":
        return "%s"
    if paramstyle == "numeric":
        return f":{index}"
    if paramstyle == "named":
        return f":p{index}"
    return f"%(p{index})s"
