"""Access level display configuration and sharing-channel presets."""

from dataclasses import dataclass

from app.models.access_token import AccessLevel


@dataclass(frozen=True)
class AccessLevelConfig:
    """User-facing description of an access tier."""

    level: AccessLevel
    user_label: str
    short_label: str
    description: str
    tooltip: str


@dataclass(frozen=True)
class ChannelPreset:
    """Recommended link settings for a common distribution channel."""

    id: str
    name: str
    access_level: AccessLevel
    expires_in_days: int
    description: str
    category: str  # 'marketing' | 'event' | 'social'


ACCESS_LEVEL_CONFIG: dict[AccessLevel, AccessLevelConfig] = {
    AccessLevel.PUBLIC: AccessLevelConfig(
        level=AccessLevel.PUBLIC,
        user_label="Browse Mode",
        short_label="Public",
        description="Anyone can view basic product information",
        tooltip="Visible to all visitors browsing your product catalog",
    ),
    AccessLevel.AFTER_CLICK: AccessLevelConfig(
        level=AccessLevel.AFTER_CLICK,
        user_label="Link Access",
        short_label="Link",
        description="People with your marketing links see more details",
        tooltip="Visible to recipients of your email campaigns, social posts, QR codes, etc.",
    ),
    AccessLevel.AFTER_RFQ: AccessLevelConfig(
        level=AccessLevel.AFTER_RFQ,
        user_label="Full Access",
        short_label="Full",
        description="Complete information + downloads after requesting quote",
        tooltip="Automatically granted after submitting an RFQ (Request for Quote)",
    ),
}


CHANNEL_PRESETS: list[ChannelPreset] = [
    ChannelPreset(
        id="email_campaign",
        name="Email Campaign",
        access_level=AccessLevel.AFTER_CLICK,
        expires_in_days=90,
        description="For email marketing campaigns",
        category="marketing",
    ),
    ChannelPreset(
        id="linkedin_post",
        name="LinkedIn Post",
        access_level=AccessLevel.AFTER_CLICK,
        expires_in_days=90,
        description="Share on LinkedIn",
        category="social",
    ),
    ChannelPreset(
        id="trade_show_qr",
        name="Trade Show QR",
        access_level=AccessLevel.AFTER_CLICK,
        expires_in_days=14,
        description="QR code for events/expos",
        category="event",
    ),
    ChannelPreset(
        id="twitter_post",
        name="Twitter/X Post",
        access_level=AccessLevel.AFTER_CLICK,
        expires_in_days=90,
        description="Share on Twitter/X",
        category="social",
    ),
    ChannelPreset(
        id="facebook_post",
        name="Facebook Post",
        access_level=AccessLevel.AFTER_CLICK,
        expires_in_days=90,
        description="Share on Facebook",
        category="social",
    ),
    ChannelPreset(
        id="partner_link",
        name="Partner/Distributor",
        access_level=AccessLevel.AFTER_CLICK,
        expires_in_days=365,
        description="Long-term partner access",
        category="marketing",
    ),
]


def get_access_level_label(level: AccessLevel | str, short: bool = False) -> str:
    """Get the user-facing label for an access level.

    Unknown values resolve to the public tier.
    """
    config = ACCESS_LEVEL_CONFIG[AccessLevel.parse(level)]
    return config.short_label if short else config.user_label
