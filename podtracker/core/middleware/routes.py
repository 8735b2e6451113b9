from __future__ import annotations

from starlette.requests import Request

UNMATCHED_ROUTE = "unmatched"


def route_template(request: Request) -> str:
    """Route template for logs and metric labels (``/api/patients/{patient_id}``).

    Raw paths carry record ids, so requests that matched no route are labelled
    ``unmatched`` instead of echoing the path.
    """

    path = getattr(request.scope.get("route"), "path", None)
    if isinstance(path, str) and path:
        return path
    return UNMATCHED_ROUTE
