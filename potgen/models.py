"""Data models for extracted strings, diagnostics and catalog builds."""

from typing import Literal

from pydantic import BaseModel, Field


class Location(BaseModel):
    """A place in a source file where a message was marked."""

    filepath: str = Field(description="Source path as supplied by the caller")
    lineno: int = Field(ge=1, description="1-based line of the marker call")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.filepath}:{self.lineno}"


class StringRecord(BaseModel):
    """A translatable message and every location it was found at."""

    msgid: str = Field(description="Literal singular text, decoded from source")
    msgid_plural: str | None = Field(
        default=None, description="Literal plural text (plural markers only)"
    )
    locations: list[Location] = Field(
        default_factory=list, description="Call sites in processing order"
    )

    model_config = {"frozen": True}

    @property
    def is_plural(self) -> bool:
        return self.msgid_plural is not None


class Diagnostic(BaseModel):
    """A problem reported to the operator while extracting."""

    filepath: str = Field(description="File the problem was found in")
    line: int | None = Field(default=None, description="1-based line, if known")
    column: int | None = Field(default=None, description="1-based column, if known")
    message: str = Field(description="Human-readable description")
    severity: Literal["warning", "fatal"] = Field(
        description="'fatal' when the whole file was dropped, 'warning' otherwise"
    )
    kind: Literal["parse", "validation", "conflict"] = Field(
        description="Which stage produced the diagnostic"
    )

    model_config = {"frozen": True}

    @property
    def location(self) -> str:
        parts = [self.filepath]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class ExtractionResult(BaseModel):
    """Records and diagnostics produced by one source file."""

    filepath: str
    records: list[StringRecord] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class CatalogResult(BaseModel):
    """Output of one catalog build."""

    text: str = Field(description="Serialized catalog")
    records: list[StringRecord] = Field(
        default_factory=list, description="Deduplicated records in catalog order"
    )
    diagnostics: list[Diagnostic] = Field(
        default_factory=list, description="Every diagnostic raised during the build"
    )
    file_count: int = Field(default=0, description="Number of source files processed")
