from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Any, Optional, Tuple, Union
from datetime import datetime


class CamelModel(BaseModel):
    """Base model accepting and emitting n8n's camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Raw node type descriptors, as returned by the n8n API

class ParameterOption(CamelModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    name: Optional[str] = None
    value: Any = None
    description: Optional[str] = None


class NodeProperty(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    display_name: str = ""
    type: str = "string"
    required: bool = False
    description: Optional[str] = None
    default: Any = None
    options: Optional[List[ParameterOption]] = None

    @field_validator("display_name", "type", "required", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class CredentialReference(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    required: bool = False


class Codex(CamelModel):
    model_config = ConfigDict(extra="ignore")

    categories: Optional[List[str]] = None


def _connection_names(value: Any) -> List[str]:
    """Normalize n8n connection declarations to a list of names"""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    names = []
    for item in value:
        if isinstance(item, dict):
            names.append(str(item.get("type", item.get("displayName", ""))))
        else:
            names.append(str(item))
    return names


class NodeTypeDescriptor(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[Union[int, float, List[Union[int, float]]]] = None
    inputs: List[str] = []
    outputs: List[str] = []
    properties: List[NodeProperty] = []
    credentials: List[CredentialReference] = []
    group: List[str] = []
    codex: Optional[Codex] = None

    @field_validator("inputs", "outputs", mode="before")
    @classmethod
    def _normalize_connections(cls, value: Any) -> List[str]:
        return _connection_names(value)

    @field_validator("properties", "credentials", "group", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# Classified catalog

class NodeParameter(CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    type: str
    required: bool = False
    description: Optional[str] = None
    default: Any = None
    options: Optional[List[ParameterOption]] = None

    @property
    def has_default(self) -> bool:
        """Whether the descriptor declared a default, including ``None``"""
        return "default" in self.model_fields_set


class CatalogEntry(CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    description: str
    category: str
    version: Union[int, float] = 1
    inputs: List[str] = []
    outputs: List[str] = []
    parameters: List[NodeParameter] = []
    credentials: List[str] = []
    is_custom: bool
    package_name: Optional[str] = None


class CatalogSnapshot(CamelModel):
    model_config = ConfigDict(frozen=True)

    entries: Tuple[CatalogEntry, ...] = ()
    built_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.entries


class DiscoveryStats(CamelModel):
    total: int
    core_nodes: int
    community_nodes: int
    categories: List[str] = Field(default_factory=list)
    last_discovery: Optional[datetime] = None
