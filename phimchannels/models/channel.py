"""
Provider, Group, Channel, Source, Content, Stream and StreamLink models.
Maps to the front-end playlist schema.
"""
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from typing import ClassVar, Literal, Optional


class SchemaModel(BaseModel):
    """Base model that leaves optional keys out of the JSON unless they were set."""
    omit_if_none: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def drop_empty_optionals(self, handler):
        data = handler(self)
        for key in self.omit_if_none:
            if data.get(key) is None and key not in self.model_fields_set:
                data.pop(key, None)
        return data


class Image(SchemaModel):
    """Artwork reference."""
    url: str
    type: str = "contain"
    width: int = 1920
    height: int = 1080


class StreamLink(SchemaModel):
    """One concrete playable URL."""
    id: str
    name: str
    url: str
    type: Literal["hls", "other"] = "hls"
    default: bool = True
    enableP2P: bool = True
    subtitles: Optional[list] = None
    remote_data: Optional[dict] = None
    request_headers: Optional[list] = None
    comments: Optional[str] = None


class StreamUnavailable(SchemaModel):
    """Why a stream has no links."""
    reason: str
    message: str


class Stream(SchemaModel):
    """One selectable episode or cut."""
    omit_if_none: ClassVar[frozenset[str]] = frozenset({"unavailable"})

    id: str
    name: str
    image: Optional[Image] = None
    stream_links: list[StreamLink] = Field(default_factory=list)
    unavailable: Optional[StreamUnavailable] = None


class Content(SchemaModel):
    """Grouping layer between a source and its streams."""
    id: str
    name: str = ""
    image: Optional[Image] = None
    streams: list[Stream] = Field(default_factory=list)


class Source(SchemaModel):
    """One upstream server or language track."""
    id: str
    name: str
    image: Optional[Image] = None
    contents: list[Content] = Field(default_factory=list)
    remote_data: Optional[dict] = None


class RemoteData(SchemaModel):
    """Deferred lookup: where the client fetches the full channel."""
    url: str


class Channel(SchemaModel):
    """One playable title."""
    omit_if_none: ClassVar[frozenset[str]] = frozenset({"title", "subtitle", "remote_data", "detail_url"})

    id: str
    name: str
    title: Optional[str] = None
    description: Optional[str] = ""
    label: str = ""
    image: Optional[Image] = None
    display: str = "default"
    type: Literal["single", "series", "playlist"] = "single"
    enable_detail: bool = True
    sources: list[Source] = Field(default_factory=list)
    remote_data: Optional[RemoteData] = None
    detail_url: Optional[str] = None
    subtitle: Optional[str] = None


class Group(SchemaModel):
    """A titled grid of channels."""
    id: str
    name: str
    display: str = "vertical"
    image: Optional[Image] = None
    grid_number: int = 1
    enable_detail: bool = True
    channels: list[Channel] = Field(default_factory=list)


class ProviderInfo(SchemaModel):
    """Static provider metadata, built once from settings."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    url: str
    color: str
    image: Image
    grid_number: int
    group_title: str = Field(exclude=True)


class ProviderEnvelope(SchemaModel):
    """Top-level listing payload."""
    id: str
    name: str
    description: str
    url: str
    color: str
    image: Image
    grid_number: int
    groups: list[Group] = Field(default_factory=list)
