from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TypeTag = Literal["null", "boolean", "number", "integer", "string", "array", "object"]

ASCII_PATTERN = "^[\\x00-\\x7f]*$"


class Schema(BaseModel):
    """The JSON schema subset that describes values produced by a typeable.

    Every constraint keyword a typeable can emit is an explicit field, so
    the set of keywords stays closed.
    """

    model_config = ConfigDict(frozen=True)

    type: tuple[TypeTag, ...] = Field(min_length=1)
    items: "Schema | None" = Field(default=None)
    properties: "dict[str, Schema] | None" = Field(default=None)
    required: tuple[str, ...] | None = Field(default=None)
    additionalProperties: "bool | Schema | None" = Field(default=None)
    minLength: int | None = Field(default=None)
    maxLength: int | None = Field(default=None)
    pattern: str | None = Field(default=None)
    minimum: int | float | None = Field(default=None)
    maximum: int | float | None = Field(default=None)

    def with_null(self) -> "Schema":
        """Return a copy of this schema that also admits ``null``."""
        type_tags: tuple[TypeTag, ...] = self.type
        if "null" not in type_tags:
            type_tags = ("null", *type_tags)
        return Schema(
            type=type_tags,
            items=self.items,
            properties=self.properties,
            required=self.required,
            additionalProperties=self.additionalProperties,
            minLength=self.minLength,
            maxLength=self.maxLength,
            pattern=self.pattern,
            minimum=self.minimum,
            maximum=self.maximum,
        )

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a plain JSON schema document, omitting unset keywords."""
        return self.model_dump(mode="json", exclude_none=True)
