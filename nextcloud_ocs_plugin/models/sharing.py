"""Pydantic models for Nextcloud Files Sharing app responses."""

from enum import IntEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ShareType(IntEnum):
    """Share type constants of the Files Sharing API."""

    USER = 0
    GROUP = 1
    PUBLIC_LINK = 3
    EMAIL = 4
    FEDERATED = 6
    CIRCLE = 7
    ROOM = 10
    DECK = 12


class Share(BaseModel):
    """Model for a share (user, group or public link) of a file or folder."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(description="Share ID")
    share_type: int = Field(description="Type of the share, see ShareType")
    share_with: str | None = Field(
        None, description="User or group ID the resource is shared with"
    )
    share_with_displayname: str | None = Field(
        None, description="Display name of the share recipient"
    )
    path: str = Field("", description="Path of the shared object")
    item_type: str | None = Field(None, description='"file" or "folder"')
    mimetype: str | None = Field(None, description="MIME type of the shared object")
    permissions: int = Field(0, description="Permission bit mask")
    password: str | None = Field(None, description="Share password, if any")
    public_upload: bool = Field(False, description="Whether public upload is allowed")
    expire_date: str | None = Field(
        None,
        validation_alias=AliasChoices("expiration", "expire_date"),
        description="Expiration date, if set",
    )
    url: str | None = Field(None, description="Public URL of a link share")
    token: str | None = Field(None, description="Public link token")
    note: str = Field("", description="Note attached to the share")
    label: str = Field("", description="Label of a link share")
    uid_owner: str = Field("", description="User ID of the share owner")
    displayname_owner: str = Field("", description="Display name of the share owner")
    uid_file_owner: str | None = Field(None, description="User ID of the file owner")
    stime: int = Field(0, description="Creation time (Unix timestamp)")
    item_mtime: int = Field(0, description="Modification time (Unix timestamp)")

    @field_validator("password", "expire_date", "url", "token", mode="before")
    @classmethod
    def _empty_to_none(cls, value):
        return value or None

    @field_validator(
        "note", "label", "path", "uid_owner", "displayname_owner", mode="before"
    )
    @classmethod
    def _none_to_empty(cls, value):
        return value or ""

    @field_validator("permissions", "stime", "item_mtime", mode="before")
    @classmethod
    def _none_to_zero(cls, value):
        return 0 if value is None else value

    @property
    def is_public_link(self) -> bool:
        return self.share_type == ShareType.PUBLIC_LINK
