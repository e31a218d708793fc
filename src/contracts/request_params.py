from pydantic import BaseModel, ConfigDict


class RequestParams(BaseModel):
    """
    Query parameters of an inbound probe request.
    """

    model_config = ConfigDict(frozen=True)

    module: str
    target: str
