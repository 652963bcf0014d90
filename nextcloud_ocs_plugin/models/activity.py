"""Pydantic models for Nextcloud Activity app responses."""

from datetime import datetime
from typing import Annotated, Any, List, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


class RichSubjectFlag(BaseModel):
    """`subject_rich` as a plain boolean, as sent by some server versions."""

    kind: Literal["flag"] = "flag"
    value: bool

    def to_wire(self) -> bool:
        return self.value


class RichSubjectParts(BaseModel):
    """`subject_rich` as a `[template, parameters]` pair.

    The template contains `{placeholder}` markers that index into
    `parameters`.
    """

    kind: Literal["parts"] = "parts"
    template: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> list[Any]:
        return [self.template, self.parameters]


RichSubject = Annotated[
    Union[RichSubjectFlag, RichSubjectParts], Field(discriminator="kind")
]


def parse_rich_subject(value: Any) -> Any:
    """Resolve the raw wire value of `subject_rich` into a tagged variant."""
    if value is None or value == "" or value == []:
        return None
    if isinstance(value, (RichSubjectFlag, RichSubjectParts)):
        return value.model_dump()
    if isinstance(value, bool):
        return {"kind": "flag", "value": value}
    if isinstance(value, (list, tuple)):
        template = value[0] if value else ""
        parameters = value[1] if len(value) > 1 else {}
        # PHP serializes an empty associative array as []
        if isinstance(parameters, list):
            parameters = {}
        return {"kind": "parts", "template": template, "parameters": parameters}
    if isinstance(value, dict) and "kind" in value:
        return value
    raise ValueError(
        f"subject_rich must be a boolean or a [template, parameters] list, got {type(value).__name__}"
    )


class Activity(BaseModel):
    """Model for a single entry of the Activity feed."""

    model_config = ConfigDict(populate_by_name=True)

    activity_id: int = Field(
        validation_alias=AliasChoices("activity_id", "id"),
        description="Activity ID",
    )
    app: str = Field("", description="Originating app")
    type: str = Field("", description="Activity type")
    subject: str = Field("", description="Unformatted subject")
    subject_rich: RichSubject | None = Field(
        None, description="Rich subject (boolean or template with parameters)"
    )
    subject_params: List[str] = Field(
        default_factory=list, description="Parameters for the subject"
    )
    message: str = Field("", description="Optional longer message")
    object_type: str = Field("", description="Type of object acted upon")
    object_id: int | None = Field(None, description="ID of the object")
    object_name: str = Field("", description="Name of the object")
    time: datetime | None = Field(
        None,
        validation_alias=AliasChoices("datetime", "time"),
        description="Timestamp of the activity",
    )
    user: str = Field(
        "",
        validation_alias=AliasChoices("user", "owner"),
        description="User who performed the action",
    )
    affecteduser: str = Field("", description="User whose stream holds the activity")
    link: str | None = Field(None, description="Link to the affected object")
    icon: str | None = Field(None, description="Icon URL")

    @field_validator(
        "app",
        "type",
        "subject",
        "message",
        "object_type",
        "object_name",
        "user",
        "affecteduser",
        mode="before",
    )
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("subject_rich", mode="before")
    @classmethod
    def _resolve_subject_rich(cls, value: Any) -> Any:
        return parse_rich_subject(value)

    @field_validator("subject_params", mode="before")
    @classmethod
    def _stringify_subject_params(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            value = list(value.values())
        return [item if isinstance(item, str) else str(item) for item in value]

    @field_validator("object_id", mode="before")
    @classmethod
    def _empty_object_id(cls, value: Any) -> Any:
        return None if value == "" else value
