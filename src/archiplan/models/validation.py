"""Data models for reporting validation outcomes."""

from pydantic import BaseModel, Field


class SemanticReport(BaseModel):
    """Outcome of the semantic validation phase.

    Attributes:
        errors: Blocking problems (unresolved references, duplicate ref_ids,
            use-after-delete, wrong entity kind).
        warnings: Advisory notices (incompatible relationships, repeated
            mutations, cascade impact).
    """

    errors: list[str] = Field(
        default_factory=list, description="Blocking semantic errors."
    )
    warnings: list[str] = Field(
        default_factory=list, description="Advisory, non-blocking warnings."
    )


class ValidationResult(BaseModel):
    """The combined result of schema and semantic validation.

    Attributes:
        schema_valid: Whether the plan passed structural validation.
        semantic_valid: Whether the plan passed semantic validation. True when
            the semantic phase did not run.
        errors: Schema errors followed by semantic errors.
        warnings: Semantic warnings.
    """

    schema_valid: bool = Field(..., description="Whether the schema phase passed.")
    semantic_valid: bool = Field(
        default=True, description="Whether the semantic phase passed."
    )
    errors: list[str] = Field(
        default_factory=list, description="Blocking errors from both phases."
    )
    warnings: list[str] = Field(
        default_factory=list, description="Advisory warnings."
    )

    @property
    def ok(self) -> bool:
        return self.schema_valid and self.semantic_valid
