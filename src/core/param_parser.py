from starlette.datastructures import QueryParams

from contracts.request_params import RequestParams
from core.errors import MissingParameter


def parse_params(query_params: QueryParams) -> RequestParams:
    """
    Extract the module and target parameters of a probe request.

    Values are returned as decoded by the query-string layer. When a
    parameter is repeated, its first value is used. The module parameter is
    checked first, so it is the one reported when both are missing.

    Raises:
        MissingParameter: If module or target is absent.
    """
    if "module" not in query_params:
        raise MissingParameter("module")
    if "target" not in query_params:
        raise MissingParameter("target")
    return RequestParams(
        module=query_params.getlist("module")[0],
        target=query_params.getlist("target")[0],
    )
