"""Errors surfaced to callers of the search service."""


class SearchRequestError(Exception):
    """The request cannot be served (no search terms could be determined).

    This is the only error a search raises. Source failures, scoring
    failures and empty results are reported as data, never as exceptions.
    """
