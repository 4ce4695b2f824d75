"""
PhimAPI response models.
Maps to the phimapi.com listing and detail payloads.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional, Union


class Category(BaseModel):
    """Genre entry attached to a movie."""
    id: str = ""
    name: str = ""
    slug: str = ""


class MovieSummary(BaseModel):
    """Movie entry as returned by the newest-movies listing."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    slug: str = ""
    name: str = ""
    origin_name: str = ""
    poster_url: str = ""
    thumb_url: str = ""
    year: Optional[Union[int, str]] = None
    quality: str = ""
    lang: Optional[str] = None
    episode_current: str = ""
    type: str = ""
    category: list[Category] = Field(default_factory=list)

    @field_validator(
        "slug", "name", "origin_name", "poster_url", "thumb_url",
        "quality", "episode_current", "type",
        mode="before",
    )
    @classmethod
    def null_to_empty(cls, value):
        # PhimAPI sends null for fields it has no value for, and numbers for some
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("lang", mode="before")
    @classmethod
    def lang_to_str(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("category", mode="before")
    @classmethod
    def category_null_to_list(cls, value):
        return [] if value is None else value

    @property
    def channel_id(self) -> str:
        """Upstream object id, or the slug for entries that lack one."""
        return self.id or self.slug


class MovieDetail(MovieSummary):
    """Full movie record from the detail endpoint."""
    content: Optional[str] = None


class Episode(BaseModel):
    """One episode (or full-movie cut) on a server."""
    slug: str = ""
    name: str = ""
    filename: str = ""
    link_m3u8: Optional[str] = None
    link_embed: Optional[str] = None

    @field_validator("slug", "name", "filename", mode="before")
    @classmethod
    def null_to_empty(cls, value):
        return "" if value is None else value


class EpisodeServer(BaseModel):
    """One upstream server or language track with its episodes."""
    server_name: str = ""
    server_data: list[Episode] = Field(default_factory=list)

    @field_validator("server_name", mode="before")
    @classmethod
    def name_null_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("server_data", mode="before")
    @classmethod
    def null_to_list(cls, value):
        return [] if value is None else value


class ListingPayload(BaseModel):
    """Body of the newest-movies listing endpoint."""
    items: list[Any]
    pagination: Optional[dict] = None


class DetailPayload(BaseModel):
    """Body of the movie detail endpoint."""
    movie: MovieDetail
    episodes: list[EpisodeServer] = Field(default_factory=list)

    @field_validator("episodes", mode="before")
    @classmethod
    def null_to_list(cls, value):
        return [] if value is None else value
