"""
Provider envelope assembly for the listing route.
"""
from phimchannels.config import Settings
from phimchannels.models.channel import Channel, Group, Image, ProviderEnvelope, ProviderInfo


def provider_info_from_settings(settings: Settings) -> ProviderInfo:
    """Build the immutable provider metadata once from settings."""
    return ProviderInfo(
        id=settings.provider_id,
        name=settings.provider_name,
        description=settings.provider_description,
        url=settings.provider_url,
        color=settings.provider_color,
        image=Image(
            url=settings.provider_logo_url,
            type=settings.provider_logo_type,
            width=settings.provider_logo_width,
            height=settings.provider_logo_height,
        ),
        grid_number=settings.provider_grid_number,
        group_title=settings.group_title,
    )


def build_envelope(page, channels: list[Channel], provider: ProviderInfo) -> ProviderEnvelope:
    """Wrap channels in the provider payload: one group named after the page."""
    group = Group(
        id=f"latest-page-{page}",
        name=f"{provider.group_title} (Trang {page})",
        display="vertical",
        image=provider.image,
        grid_number=1,
        enable_detail=True,
        channels=channels,
    )
    return ProviderEnvelope(
        id=provider.id,
        name=provider.name,
        description=provider.description,
        url=provider.url,
        color=provider.color,
        image=provider.image,
        grid_number=provider.grid_number,
        groups=[group],
    )
