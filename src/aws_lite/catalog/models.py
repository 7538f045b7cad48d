"""Service definition models for catalog YAML files."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aws_lite.domain.operations import PaginatorSpec, ParamRule


def _ensure_dict(v: Any) -> dict:
    """Convert None to empty dict, pass through mappings."""
    if v is None:
        return {}
    return v


class ParamRuleModel(BaseModel):
    type: Literal["string", "number", "boolean", "object", "array"]
    required: bool = Field(default=False)

    def to_rule(self) -> ParamRule:
        return ParamRule(kind=self.type, required=self.required)


class PaginatorModel(BaseModel):
    cursor: str
    token: str
    accumulator: str
    type: Literal["payload", "query"] | None = Field(default=None)
    default: Literal["enabled", "disabled"] | None = Field(default=None)

    def to_spec(self) -> PaginatorSpec:
        return PaginatorSpec(
            cursor=self.cursor,
            token=self.token,
            accumulator=self.accumulator,
            type=self.type,
            default=self.default,
        )


class OperationModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    params: dict[str, ParamRuleModel] = Field(default_factory=dict, alias="validate")
    method: str | None = Field(default=None)
    path: str | None = Field(default=None, description="Path template, e.g. /{Bucket}")
    query: dict[str, str] = Field(default_factory=dict, description="Static query values")
    query_params: dict[str, str] = Field(
        default_factory=dict, description="Parameter name -> query string key"
    )
    header_params: dict[str, str] = Field(
        default_factory=dict, description="Parameter name -> header name"
    )
    payload_param: str | None = Field(
        default=None, description="Parameter sent as the whole request body"
    )
    awsjson: bool | list[str] | None = Field(default=None)
    response_awsjson: list[str] = Field(default_factory=list)
    paginator: PaginatorModel | None = Field(default=None)
    hooks: str | None = Field(default=None, description="module:attribute of Python hooks")

    @field_validator("params", "query", "query_params", "header_params", mode="before")
    @classmethod
    def _validate_dicts(cls, v: Any) -> dict:
        return _ensure_dict(v)

    @field_validator("method")
    @classmethod
    def _validate_method(cls, v: str | None) -> str | None:
        return v.upper() if v else None


class ServiceModel(BaseModel):
    service: str
    signing_name: str
    protocol: Literal["json", "rest-json", "rest-xml", "query"]
    api_version: str | None = Field(default=None)
    target_prefix: str | None = Field(default=None)
    content_type: str | None = Field(default=None)
    operations: dict[str, OperationModel] = Field(default_factory=dict)

    @field_validator("operations", mode="before")
    @classmethod
    def _validate_operations(cls, v: Any) -> dict:
        # A bare "Operation:" line means an operation with no declared rules
        if isinstance(v, dict):
            return {name: _ensure_dict(op) for name, op in v.items()}
        return _ensure_dict(v)

    @classmethod
    def from_yaml(cls, data: dict[str, object]) -> "ServiceModel":
        return cls.model_validate(data)
