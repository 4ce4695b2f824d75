"""
PhimAPI -> channel mapping.

Turns PhimAPI movie/server/episode records into channel/source/content/
stream/stream_link trees. Every function here is pure: the same upstream
payload always maps to the same output, ids included.

The layout choices (summary mode, episode policy, artwork field) are fixed
per deployment through MappingOptions and never switched per request.
"""
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict

from phimchannels.config import EpisodePolicy, ImageField, PointerStyle, Settings, SummaryMode
from phimchannels.models.channel import (
    Channel,
    Content,
    Image,
    RemoteData,
    Source,
    Stream,
    StreamLink,
    StreamUnavailable,
)
from phimchannels.models.upstream import Episode, EpisodeServer, MovieDetail, MovieSummary

SOURCE_KEY_PATTERN = re.compile(r"[^a-zA-Z0-9]")

DEFAULT_SOURCE_NAME = "Nguồn"
DEFAULT_LINK_NAME = "Server 1"
DEFAULT_EPISODE_NAME = "Tập"
DEFAULT_STREAM_NAME = "Full"
FALLBACK_SOURCE_NAME = "Nguồn Phụ"
NO_STREAM_LINK_REASON = "no_stream_link"
NO_STREAM_LINK_MESSAGE = "Không tìm thấy link m3u8. Cần thêm logic lấy link chi tiết."


class MappingOptions(BaseModel):
    """Deployment-wide mapping strategy."""
    model_config = ConfigDict(frozen=True)

    summary_mode: SummaryMode = SummaryMode.EAGER
    pointer_style: PointerStyle = PointerStyle.REMOTE_DATA
    episode_policy: EpisodePolicy = EpisodePolicy.PER_EPISODE_STREAM
    image_field: ImageField = ImageField.POSTER_URL

    @classmethod
    def from_settings(cls, settings: Settings) -> "MappingOptions":
        return cls(
            summary_mode=settings.summary_mode,
            pointer_style=settings.pointer_style,
            episode_policy=settings.episode_policy,
            image_field=settings.image_field,
        )


def source_key(server_name: str, lowercase: bool = True) -> str:
    """
    Normalize a server name into an id fragment.

    Replaces every character outside [A-Za-z0-9] with '-', after lowercasing
    unless `lowercase` is False. Distinct names can collide ("HD#1" and
    "HD-1" both give "hd-1").
    """
    if lowercase:
        server_name = server_name.lower()
    return SOURCE_KEY_PATTERN.sub("-", server_name)


def channel_type(movie: MovieSummary) -> str:
    return "series" if movie.type == "series" else "single"


def channel_label(movie: MovieSummary) -> str:
    return f"{movie.episode_current} - {movie.quality} - {movie.lang or ''}"


def channel_image(movie: MovieSummary, options: MappingOptions) -> Image:
    return Image(url=getattr(movie, options.image_field.value))


def _pick_url(episode: Episode, allow_embed: bool) -> Optional[str]:
    if episode.link_m3u8:
        return episode.link_m3u8
    if allow_embed and episode.link_embed:
        return episode.link_embed
    return None


def episode_link(episode: Episode, link_id: str, default_name: str, allow_embed: bool) -> Optional[StreamLink]:
    """Playable link for one episode, or None when it has no usable URL."""
    url = _pick_url(episode, allow_embed)
    if not url:
        return None
    # Embed URLs keep the "hls" type
    return StreamLink(id=link_id, name=episode.name or default_name, url=url, type="hls")


def episode_links(
    server: EpisodeServer,
    id_prefix: str,
    default_name: str,
    allow_embed: bool,
) -> list[StreamLink]:
    """One link per episode of a server, ids `{id_prefix}-{episode slug}`."""
    links = []
    for episode in server.server_data:
        link = episode_link(episode, f"{id_prefix}-{episode.slug}", default_name, allow_embed)
        if link:
            links.append(link)
    return links


# Fallback / basic channels

def fallback_source(movie: MovieSummary, options: MappingOptions) -> Source:
    """Single placeholder source for a title with no playable link."""
    base_id = movie.channel_id
    return Source(
        id=f"{base_id}-no-source",
        name=FALLBACK_SOURCE_NAME,
        contents=[
            Content(
                id=f"{base_id}-content",
                name=movie.name,
                streams=[
                    Stream(
                        id=f"{base_id}-stream",
                        name=movie.episode_current or DEFAULT_STREAM_NAME,
                        image=channel_image(movie, options),
                        stream_links=[],
                        unavailable=StreamUnavailable(
                            reason=NO_STREAM_LINK_REASON,
                            message=NO_STREAM_LINK_MESSAGE,
                        ),
                    )
                ],
            )
        ],
    )


def basic_channel(movie: MovieSummary, options: MappingOptions) -> Channel:
    """Degraded channel used when the detail lookup for a listing item fails."""
    return Channel(
        id=movie.channel_id,
        name=movie.name,
        description=f"Phim: {movie.name}. Tình trạng: {movie.episode_current}",
        label=channel_label(movie),
        image=channel_image(movie, options),
        display="default",
        type=channel_type(movie),
        enable_detail=True,
        sources=[fallback_source(movie, options)],
    )


# Summary mappers

def summary_sources(
    slug: str,
    movie: MovieDetail,
    servers: list[EpisodeServer],
    options: MappingOptions,
) -> list[Source]:
    """
    One source per server, each holding a single "current episode" stream
    with one link per episode. Embed links stand in for missing m3u8 links.
    Servers without any usable link are dropped. Server names keep their case
    in these ids.
    """
    sources = []
    for server in servers:
        source_id = f"{slug}-{source_key(server.server_name, lowercase=False)}"
        links = episode_links(server, source_id, DEFAULT_LINK_NAME, allow_embed=True)
        if not links:
            continue

        sources.append(Source(
            id=source_id,
            name=server.server_name.replace("#", "", 1) or DEFAULT_SOURCE_NAME,
            contents=[
                Content(
                    id=f"{slug}-content",
                    name=movie.name,
                    streams=[
                        Stream(
                            id=f"{slug}-stream",
                            name=movie.episode_current or DEFAULT_STREAM_NAME,
                            image=channel_image(movie, options),
                            stream_links=links,
                        )
                    ],
                )
            ],
        ))
    return sources


def map_summary_with_detail(
    summary: MovieSummary,
    movie: MovieDetail,
    servers: list[EpisodeServer],
    options: MappingOptions,
) -> Channel:
    """Full listing channel for an item whose detail lookup succeeded."""
    sources = summary_sources(summary.slug, movie, servers, options)
    return Channel(
        id=movie.id or summary.channel_id,
        name=movie.name,
        description=movie.content or movie.origin_name,
        label=channel_label(movie),
        image=channel_image(movie, options),
        display="default",
        type=channel_type(movie),
        enable_detail=True,
        sources=sources or [fallback_source(movie, options)],
    )


def map_summary_pointer(summary: MovieSummary, options: MappingOptions, base_url: str = "") -> Channel:
    """
    Lightweight listing channel: no sources, just a pointer to the detail route.

    Args:
        summary: Listing item
        options: Deployment mapping options
        base_url: Absolute base URL of the current request (used by remote_data)
    """
    if options.pointer_style == PointerStyle.REMOTE_DATA:
        pointer = {"remote_data": RemoteData(url=f"{base_url.rstrip('/')}/phim/{summary.slug}")}
    else:
        pointer = {"detail_url": f"/phim/{summary.slug}"}

    return Channel(
        id=summary.slug,
        name=summary.name,
        description=summary.origin_name,
        label=channel_label(summary),
        image=channel_image(summary, options),
        display="default",
        type=channel_type(summary),
        enable_detail=True,
        sources=[],
        **pointer,
    )


# Detail mapper

def _per_episode_streams(server: EpisodeServer) -> list[Stream]:
    streams = []
    for episode in server.server_data:
        link = episode_link(episode, f"{episode.slug}-s1", DEFAULT_EPISODE_NAME, allow_embed=False)
        if link:
            streams.append(Stream(id=episode.slug, name=link.name, stream_links=[link]))
    return streams


def _current_episode_stream(key: str, movie: MovieDetail, server: EpisodeServer) -> Stream:
    return Stream(
        id=f"stream-{key}",
        name=movie.episode_current or DEFAULT_STREAM_NAME,
        stream_links=episode_links(server, key, DEFAULT_EPISODE_NAME, allow_embed=False),
    )


def detail_sources(movie: MovieDetail, servers: list[EpisodeServer], options: MappingOptions) -> list[Source]:
    sources = []
    for server in servers:
        key = source_key(server.server_name)
        if options.episode_policy == EpisodePolicy.PER_EPISODE_STREAM:
            streams = _per_episode_streams(server)
            if not streams:
                continue
        else:
            # Kept even when every link dropped
            streams = [_current_episode_stream(key, movie, server)]

        sources.append(Source(
            id=key,
            name=server.server_name,
            contents=[Content(id=f"content-{key}", name="", streams=streams)],
        ))
    return sources


def map_detail_channel(movie: MovieDetail, servers: list[EpisodeServer], options: MappingOptions) -> Channel:
    """Full playlist channel served by the detail route. `subtitle` is `lang` as sent."""
    return Channel(
        id=movie.slug,
        name=movie.name,
        title=movie.origin_name,
        description=movie.content,
        label=movie.episode_current or DEFAULT_STREAM_NAME,
        image=channel_image(movie, options),
        display="default",
        type="playlist",
        enable_detail=True,
        sources=detail_sources(movie, servers, options),
        subtitle=movie.lang,
    )
