"""Pydantic models for code entities extracted from source files."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class EntityModel(BaseModel):
    """Base class for all extracted models.

    Attributes are snake_case in Python and camelCase once serialized, which is
    the form handed to the text-generation service.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> str:
        """Compact camelCase JSON, with unset optional fields omitted."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class Location(EntityModel):
    """Source location of an entity (1-indexed, inclusive)."""

    file: str = Field(..., description="Path of the file the entity was found in")
    start_line: int = Field(..., ge=1, description="Starting line number (1-indexed)")
    end_line: int = Field(..., ge=1, description="Ending line number (1-indexed)")

    @model_validator(mode="after")
    def check_line_order(self) -> "Location":
        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} precedes start_line {self.start_line}")
        return self


class Parameter(EntityModel):
    """A function or method parameter."""

    name: str = Field(..., description="Parameter name")
    type: str = Field(default="any", description="Best-effort textual type")


class FunctionEntity(EntityModel):
    """Represents a function, or a variable-bound arrow function / function expression."""

    name: str = Field(..., min_length=1, description="Function name")
    parameters: list[Parameter] = Field(default_factory=list, description="Ordered parameters")
    return_type: str = Field(default="any", description="Best-effort return type")
    body: str | None = Field(default=None, description="Source text of the implementation")
    documentation: str = Field(default="", description="Leading documentation comment")
    location: Location


class MethodEntity(FunctionEntity):
    """A function owned by a class."""


class PropertyEntity(EntityModel):
    """A class field declaration."""

    name: str
    type: str = "any"
    documentation: str = ""


class ClassEntity(EntityModel):
    """Represents a class definition."""

    name: str = Field(..., min_length=1, description="Class name")
    methods: list[MethodEntity] = Field(default_factory=list, description="Ordered methods")
    properties: list[PropertyEntity] = Field(default_factory=list, description="Ordered properties")
    documentation: str = Field(default="", description="Leading documentation comment")
    location: Location
    note: str | None = Field(
        default=None,
        description="Annotation set on partial records of a class split across method groups",
    )


class AnalysisResult(EntityModel):
    """Functions and classes collected from one file or a whole project.

    Order is traversal order, then declaration order within each file. Entities
    with the same name in different files are kept as distinct entries.
    """

    functions: list[FunctionEntity] = Field(default_factory=list)
    classes: list[ClassEntity] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.functions and not self.classes

    def to_context(self) -> dict[str, Any]:
        """JSON-ready camelCase dict, as sent to the text-generation service."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FileFailure(EntityModel):
    """A file that could not be analyzed, and why."""

    file: str
    error: str


class ProjectAnalysis(EntityModel):
    """Outcome of analyzing a whole directory tree."""

    result: AnalysisResult = Field(default_factory=AnalysisResult)
    failures: list[FileFailure] = Field(default_factory=list)
    files_scanned: int = Field(default=0, description="Files found by the traversal")
    files_analyzed: int = Field(default=0, description="Files handed to a parser")

    @property
    def functions(self) -> list[FunctionEntity]:
        return self.result.functions

    @property
    def classes(self) -> list[ClassEntity]:
        return self.result.classes
