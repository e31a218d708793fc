import re
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class HttpMethod(str, Enum):
    """
    HTTP methods a probe module may use against its target.
    """

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


# Methods for which a request body is rejected
BODYLESS_METHODS = frozenset({HttpMethod.GET, HttpMethod.HEAD})


class StatusCodeClass(str, Enum):
    HTTP_1XX = "1xx"
    HTTP_2XX = "2xx"
    HTTP_3XX = "3xx"
    HTTP_4XX = "4xx"
    HTTP_5XX = "5xx"

    def contains(self, status_code: int) -> bool:
        lower = int(self.value[0]) * 100
        return lower <= status_code < lower + 100


class StatusClassCriteria(BaseModel):
    """
    Accept any status code inside one status-code class, e.g. 2xx => [200, 300).
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["class"] = "class"
    status_class: StatusCodeClass = StatusCodeClass.HTTP_2XX

    def accepts(self, status_code: int) -> bool:
        return self.status_class.contains(status_code)


class StatusCodeSetCriteria(BaseModel):
    """
    Accept only the listed status codes.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["codes"] = "codes"
    codes: frozenset[int]

    def accepts(self, status_code: int) -> bool:
        return status_code in self.codes


SuccessCriteria = Annotated[
    Union[StatusClassCriteria, StatusCodeSetCriteria], Field(discriminator="kind")
]


class ProbeConfiguration(BaseModel):
    """
    Read-only, defaulted view over a module definition.

    Raw module definitions use the blackbox-exporter style keys
    (``valid_status_codes``, ``fail_if_matches_regexp``, ...). Regular
    expressions may be given as strings or compiled patterns.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    body: str = ""
    follow_redirects: bool = True
    # Literal strings compare by equality, patterns by re.search
    allowed_targets: tuple[Union[str, re.Pattern], ...] = ()
    success_criteria: SuccessCriteria = Field(
        default_factory=StatusClassCriteria,
        validation_alias=AliasChoices("valid_status_codes", "success_criteria"),
    )
    fail_if_matches_regexp: tuple[re.Pattern, ...] = ()
    fail_if_not_matches_regexp: tuple[re.Pattern, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _invert_no_follow_redirects(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and "no_follow_redirects" in data:
            data = dict(data)
            data["follow_redirects"] = not data.pop("no_follow_redirects")
        return data

    @field_validator("headers")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        # Header names and values go on the wire as ASCII
        for name, header_value in value.items():
            if not (name.isascii() and header_value.isascii()):
                raise ValueError(f"header {name!r} must be ASCII")
        return MappingProxyType(dict(value))

    @field_validator("allowed_targets", mode="before")
    @classmethod
    def _compile_target_patterns(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        entries = []
        for entry in value:
            if isinstance(entry, Mapping):
                try:
                    entry = re.compile(entry["regexp"])
                except (KeyError, re.error) as e:
                    raise ValueError(f"invalid allowed_targets pattern {entry!r}: {e}") from e
            entries.append(entry)
        return tuple(entries)

    @field_validator("success_criteria", mode="before")
    @classmethod
    def _coerce_success_criteria(cls, value: Any) -> Any:
        if isinstance(value, (str, StatusCodeClass)):
            return {"kind": "class", "status_class": value}
        if isinstance(value, (list, tuple, set, frozenset)):
            return {"kind": "codes", "codes": value}
        if isinstance(value, Mapping):
            return dict(value)
        return value

    @classmethod
    def from_module(cls, raw: Mapping[str, Any]) -> "ProbeConfiguration":
        return cls.model_validate(dict(raw))
