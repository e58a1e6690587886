from pydantic import BaseModel, Field
from typing import List, Optional
from shortlink_app.models.entry import Entry, EntryMetadata


class AddLinkRequest(BaseModel):
    key: Optional[str] = Field(None, description="Explicit alias; generated from the link if omitted")
    link: str = Field(..., description="The URL to redirect to")


class AddLinkFailure(BaseModel):
    """Per-field validation messages (None means the field is fine)"""
    key: Optional[str] = None
    link: Optional[str] = None


class LinkResponse(BaseModel):
    """A stored alias with its entry flattened"""
    key: str
    link: str
    metadata: EntryMetadata
    short_url: str

    @classmethod
    def from_entry(cls, key: str, entry: Entry, base_url: str, **extra) -> "LinkResponse":
        """Build the response, short_url is base_url + key"""
        return cls(
            key=key,
            link=entry.link,
            metadata=entry.metadata,
            short_url=f"{base_url.rstrip('/')}/{key}",
            **extra
        )


class AddLinkResponse(LinkResponse):
    created: bool = Field(..., description="False if the link already had this generated key")


class LinkSearchResponse(BaseModel):
    link: str
    keys: List[str]
