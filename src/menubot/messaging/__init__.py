"""Outbound chat connector messaging."""

from menubot.messaging.sender import ActivitySender, build_activity_sender

__all__ = ["ActivitySender", "build_activity_sender"]
