"""Chat connector activity payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ChannelAccount(BaseModel):
    """Participant or conversation reference."""

    id: str
    name: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, extra="ignore")


class InboundActivity(BaseModel):
    """Activity delivered to the webhook by the chat connector."""

    type: str = Field(default="message")
    id: Optional[str] = Field(default=None)
    timestamp: Optional[str] = Field(default=None)
    text: str = Field(default="")
    sender: ChannelAccount = Field(alias="from")
    recipient: ChannelAccount = Field(validation_alias=AliasChoices("to", "recipient"))
    conversation: ChannelAccount

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class OutboundActivity(BaseModel):
    """Message posted back to a conversation."""

    type: str = Field(default="message")
    channel_id: str = Field(default="skype", alias="channelId")
    sender: ChannelAccount = Field(alias="from")
    recipient: ChannelAccount = Field(alias="to")
    text: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


def build_reply(inbound: InboundActivity, text: str) -> OutboundActivity:
    """Address a reply from the bot back to the sender of ``inbound``."""

    return OutboundActivity(sender=inbound.recipient, recipient=inbound.sender, text=text)


__all__ = ["ChannelAccount", "InboundActivity", "OutboundActivity", "build_reply"]
