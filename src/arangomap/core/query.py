"""
Raw AQL execution with sub-query splicing.

AQL bind parameters only take values, never query bodies. Variables whose
value is a nested query descriptor are therefore resolved to AQL text and
spliced in place of their `@name` placeholder; every other variable stays a
real bind parameter, so scalar input is never interpolated into the query.

Links:
- AQL bind parameters: https://docs.arangodb.com/stable/aql/fundamentals/bind-parameters/
- ArangoDB Python Driver: https://docs.python-arango.com/

Sample input:
    bind_variables(
        "FOR u IN users FILTER u._key IN @keys AND u.age > @age RETURN u",
        [("keys", AQL("FOR p IN posts RETURN p.author")), ("age", 30)],
    )

Expected output:
    ("FOR u IN users FILTER u._key IN (FOR p IN posts RETURN p.author) AND u.age > @age RETURN u",
     {"age": 30})
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from arango.exceptions import AQLQueryExecuteError, CursorNextError

from arangomap.core.errors import StoreError
from arangomap.core.utils.connection import Store
from arangomap.core.utils.log_utils import log_safe_results

Variables = Union[Mapping[str, Any], Sequence[Tuple[str, Any]], None]


@dataclass(frozen=True)
class AQL:
    """
    A nested query: AQL text plus its own variables.

    Its scalar variables are merged into the outer query's bind variables
    when it is spliced.
    """

    text: str
    variables: Variables = ()

    def __post_init__(self):
        object.__setattr__(self, "variables", tuple(_pairs(self.variables)))

    def build(self) -> Tuple[str, Dict[str, Any]]:
        return bind_variables(self.text, self.variables)


def _pairs(variables: Variables) -> List[Tuple[str, Any]]:
    if variables is None:
        return []
    if isinstance(variables, Mapping):
        return list(variables.items())
    return [(name, value) for name, value in variables]


def _placeholder(name: str) -> "re.Pattern[str]":
    # @name but not @@name (collection parameter) and not @name_suffix
    return re.compile(r"(?<![@\w])@" + re.escape(name) + r"(?!\w)")


def bind_variables(query: str, variables: Variables = None) -> Tuple[str, Dict[str, Any]]:
    """
    Split variables into spliced sub-queries and bind parameters.

    Args:
        query: AQL text with `@name` placeholders.
        variables: Mapping or ordered (name, value) pairs.

    Returns:
        tuple: (final query text, bind variables in encounter order)

    Raises:
        ValueError: If a nested query's variable clashes with an outer one.
    """
    bind_vars: Dict[str, Any] = {}

    for name, value in _pairs(variables):
        name = str(name)
        if isinstance(value, AQL):
            text, nested_vars = value.build()
            query, count = _placeholder(name).subn(lambda _: f"({text})", query)
            if not count:
                logger.warning(f"Nested query '{name}' has no @{name} placeholder, skipping it")
                continue
            for nested_name, nested_value in nested_vars.items():
                if nested_name in bind_vars and bind_vars[nested_name] != nested_value:
                    raise ValueError(f"Conflicting values for bind variable '{nested_name}'")
                bind_vars[nested_name] = nested_value
        else:
            if name in bind_vars and bind_vars[name] != value:
                raise ValueError(f"Conflicting values for bind variable '{name}'")
            bind_vars[name] = value

    return query, bind_vars


def aql_query(
    store: Store,
    query: str,
    variables: Variables = None,
    batch_size: Optional[int] = None,
) -> List[Any]:
    """
    Run a raw AQL query and return all result rows.

    The cursor is drained, so every result batch ends up in one ordered list.

    Raises:
        StoreError: If the query fails (syntax errors included).
    """
    query, bind_vars = bind_variables(query, variables)
    logger.debug(f"AQL: {query} | bind_vars: {list(bind_vars)}")

    try:
        cursor = store.db.aql.execute(query, bind_vars=bind_vars, batch_size=batch_size)
        results = [doc for doc in cursor]
    except (AQLQueryExecuteError, CursorNextError) as e:
        logger.error(f"AQL query execution failed: {e}")
        raise StoreError.from_arango(e, "AQL query execution failed") from e

    if results and all(isinstance(doc, dict) for doc in results):
        logger.debug(f"AQL returned {len(results)} rows: {log_safe_results(results[:3])}")
    else:
        logger.debug(f"AQL returned {len(results)} rows")
    return results
