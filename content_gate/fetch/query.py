"""Query string helpers that preserve server-issued parameters verbatim."""

from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit


def get_query_param(url: str, name: str) -> str | None:
    """Get the first non-empty value of a query parameter.

    Args:
        url: URL to inspect.
        name: Parameter name (case-sensitive).

    Returns:
        Decoded parameter value, or None when absent or empty.
    """
    try:
        query = urlsplit(url).query
    except ValueError:
        return None

    for key, value in parse_qsl(query, keep_blank_values=True):
        if key == name and value:
            return value
    return None


def set_query_param(url: str, name: str, value: str) -> str:
    """Set a query parameter, replacing any existing occurrences.

    Other parameters keep their original encoding and order so opaque
    server tokens survive the round trip untouched. The new parameter
    is appended last.

    Args:
        url: URL to modify.
        name: Parameter name.
        value: Parameter value (percent-encoded on output).

    Returns:
        URL with the parameter set. A URL that cannot be split is
        returned unchanged so the request fails as an invalid URL.

    Examples:
        >>> set_query_param("https://a.example/p?x=1", "push_id", "u1")
        'https://a.example/p?x=1&push_id=u1'
        >>> set_query_param("https://a.example/p", "pathid", "abc")
        'https://a.example/p?pathid=abc'
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    kept = [
        pair
        for pair in parts.query.split("&")
        if pair and pair.split("=", 1)[0] != name
    ]
    kept.append(f"{name}={quote(value, safe='')}")
    return urlunsplit(parts._replace(query="&".join(kept)))


def find_last_query_param(urls: list[str], name: str) -> str | None:
    """Get the parameter value from the most recent URL carrying it.

    Args:
        urls: URLs in visit order.
        name: Parameter name.

    Returns:
        Value from the last URL that carries the parameter, or None.
    """
    for url in reversed(urls):
        value = get_query_param(url, name)
        if value is not None:
            return value
    return None
