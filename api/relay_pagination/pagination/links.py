"""RFC 8288 ``Link`` headers for relay connections."""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from .models import Connection


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    connection: Connection
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    Args:
        base_url: Base URL for the resource
        params: Current query parameters; cursor and size arguments are replaced
        connection: Page the header describes

    Returns:
        Link header value or None if there is no adjacent page
    """
    page_info = connection.page_info
    size = params.get("first") or params.get("last")
    base = {k: v for k, v in params.items() if k not in ("first", "last", "after", "before") and v is not None}
    links = []

    if page_info.has_next_page and page_info.end_cursor:
        next_params = {**base, "after": page_info.end_cursor}
        if size:
            next_params["first"] = size
        links.append(f'<{base_url}?{urlencode(next_params)}>; rel="next"')

    if page_info.has_previous_page and page_info.start_cursor:
        prev_params = {**base, "before": page_info.start_cursor}
        if size:
            prev_params["last"] = size
        links.append(f'<{base_url}?{urlencode(prev_params)}>; rel="prev"')

    return ", ".join(links) if links else None
