"""Data models used by the menu engine and the chat connector."""

from menubot.models.activity import ChannelAccount, InboundActivity, OutboundActivity, build_reply
from menubot.models.site import SiteConfig
from menubot.models.token import BearerToken

__all__ = [
    "BearerToken",
    "ChannelAccount",
    "InboundActivity",
    "OutboundActivity",
    "SiteConfig",
    "build_reply",
]
