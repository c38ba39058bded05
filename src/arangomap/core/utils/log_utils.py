"""
Logging utilities for arangomap operations.

Write operations log the documents they send at DEBUG level. Documents can
carry large strings or long arrays (embeddings, blobs), so values are
shortened before they reach the log.

Sample input:
    truncate_large_value({"title": "x" * 500, "vector": list(range(300))})

Expected output:
    {'title': 'xxxxx...xxxxx', 'vector': '[<300 int elements>]'}
"""

from typing import Any, Dict, List


def truncate_large_value(
    value: Any,
    max_str_len: int = 100,
    max_list_elements_shown: int = 10,
) -> Any:
    """
    Truncate large strings or arrays to make them log-friendly.

    Strings longer than `max_str_len` keep their head and tail. Lists longer
    than `max_list_elements_shown` are summarized; shorter lists and dicts
    are truncated recursively.

    Args:
        value: The value to potentially truncate
        max_str_len: Maximum length of strings before truncation
        max_list_elements_shown: Maximum number of elements to show in arrays

    Returns:
        Truncated or original value
    """
    if isinstance(value, str):
        if len(value) <= max_str_len:
            return value
        half_len = max(max_str_len // 2, 1)
        return f"{value[:half_len]}...{value[-half_len:]}"

    if isinstance(value, (list, tuple)):
        if len(value) > max_list_elements_shown:
            element_type = type(value[0]).__name__
            return f"[<{len(value)} {element_type} elements>]"
        return [truncate_large_value(item, max_str_len, max_list_elements_shown) for item in value]

    if isinstance(value, dict):
        return {
            k: truncate_large_value(v, max_str_len, max_list_elements_shown)
            for k, v in value.items()
        }

    return value


def log_safe_results(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Create a log-safe version of query results by truncating large fields
    within each document.

    Raises:
        TypeError: If `results` is not a list of dictionaries.
    """
    if not isinstance(results, list):
        raise TypeError(
            f"Expected input to be a List[Dict[str, Any]], but got {type(results).__name__}."
        )

    for index, item in enumerate(results):
        if not isinstance(item, dict):
            raise TypeError(
                f"Expected all elements in the input list to be dictionaries (dict), "
                f"but found element of type {type(item).__name__} at index {index}."
            )

    return [truncate_large_value(doc) for doc in results]
