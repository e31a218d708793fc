from pydantic import BaseModel, ConfigDict, Field


class ProbeOutcome(BaseModel):
    """
    Measured result of a single probe attempt.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    duration_seconds: float = 0.0
    http_status_code: int = 0
    redirected: bool = False
    # -1 when the target sent no parsable content-length
    content_length: int = -1
    # Provenance labels (origin point-of-presence, caller location)
    labels: dict[str, str] = Field(default_factory=dict)
