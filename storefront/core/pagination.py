"""
Limit/offset normalization shared by every listing operation
"""
from typing import Tuple

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def clamp_pagination(limit: int, offset: int) -> Tuple[int, int]:
    """
    Normalize paging parameters

    limit <= 0 falls back to DEFAULT_LIMIT, limit above MAX_LIMIT is capped,
    negative offsets become 0.
    """
    if limit <= 0:
        limit = DEFAULT_LIMIT
    elif limit > MAX_LIMIT:
        limit = MAX_LIMIT

    if offset < 0:
        offset = 0

    return limit, offset
