"""
=============================================================================
QUERY STRING PARSER
=============================================================================

Decodes the query part of a request target into a mapping of parameter
name to the ordered list of its values.

    /api/hello?name=Marcin&tag=a&tag=b&flag
               ──────────────┬─────────────
                             │
                             ▼
        {
            "name": ["Marcin"],
            "tag":  ["a", "b"],      ← duplicates append, order kept
            "flag": [None],          ← no "=" means no value at all
        }

=============================================================================
DECODING RULES
=============================================================================

    Input                 Result
    ───────────────────   ──────────────────────────────
    None / ""             {}
    "a=1&a=2"             {"a": ["1", "2"]}
    "a"                   {"a": [None]}
    "a="                  {"a": [""]}
    "a=1=2"               {"a": ["1=2"]}   (split at the FIRST "=")
    "full+name=J%C3%B3"   {"full name": ["Jó"]}
    "&"                   {"": [None, None]}

Keys and values use form encoding: "+" is a space and %XX sequences are
UTF-8 bytes. Invalid byte sequences become U+FFFD instead of raising, so
a client can never turn a decoding problem into a failed request.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "Why not urllib.parse.parse_qs?"
A: "parse_qs drops the difference between 'flag' and 'flag=' (both become
   an empty string with keep_blank_values, or vanish without it). Here a
   valueless parameter is a distinct case and must stay visible."

Q: "Why a list per key?"
A: "HTTP allows a parameter to repeat (?id=1&id=2). A plain dict would
   silently keep only one of them."

=============================================================================
"""

from typing import Dict, List, Optional
from urllib.parse import unquote_plus


QueryParams = Dict[str, List[Optional[str]]]


def _decode(component: str) -> str:
    return unquote_plus(component, encoding="utf-8", errors="replace")


def parse_query(query: Optional[str]) -> QueryParams:
    """
    Parse a raw, URL-encoded query string.

    Args:
        query: Query string without the leading "?". May be None or empty.

    Returns:
        Mapping of decoded name to decoded values in encounter order.
        A pair without "=" contributes None.
    """
    params: QueryParams = {}
    if not query:
        return params

    for pair in query.split("&"):
        name, separator, value = pair.partition("=")
        decoded_value = _decode(value) if separator else None
        params.setdefault(_decode(name), []).append(decoded_value)

    return params
