# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Helpers turning raw query strings and URLs into flat multimaps."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from bracketqs.codec.decoder import unmarshal
from bracketqs.errors import QuerySyntaxError
from bracketqs.model.values import Values

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def parse_query(text: str) -> Values:
    """Split a query string into a flat multimap.

    Keys keep their order of first appearance and values their order of
    appearance. A leading ``?`` is ignored, ``+`` decodes to a space and keys
    without ``=`` map to an empty string.

    Raises:
        QuerySyntaxError: If a percent escape decodes to invalid UTF-8.
    """
    text = text.removeprefix("?")
    try:
        pairs = parse_qsl(text, keep_blank_values=True, errors="strict")
    except ValueError as exc:
        raise QuerySyntaxError(f"bracketqs: invalid query string {text!r}: {exc}") from exc
    values = Values()
    for key, value in pairs:
        values.add(key, value)
    logger.debug("Parsed %d pair(s) into %d key(s)", len(pairs), len(values))
    return values


def parse_url(link: str) -> Values:
    """Parse the query component of a URL into a flat multimap.

    Raises:
        QuerySyntaxError: If the URL or its query component is malformed.
    """
    try:
        query = urlsplit(link).query
    except ValueError as exc:
        raise QuerySyntaxError(f"bracketqs: invalid URL {link!r}: {exc}") from exc
    return parse_query(query)


def unmarshal_url(link: str, target: Any, tp: Any = None) -> None:
    """Decode the query component of *link* into *target*, in place.

    See :func:`bracketqs.unmarshal` for the accepted targets and errors.
    """
    unmarshal(parse_url(link), target, tp)
