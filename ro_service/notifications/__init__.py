"""
Due-service reminders: channels, scanning, urgency and the dispatch run.
"""
from ro_service.notifications.channels import (
    ChannelFailure, ChannelResult, ChannelSuccess, EmailSender, FailureKind, SMSSender,
)
from ro_service.notifications.dispatcher import (
    DueServiceNotifier, RecipientOutcome, RunSummary, build_notifier,
)
from ro_service.notifications.recipients import AdminContact, Recipient, resolve_recipients
from ro_service.notifications.urgency import Urgency, UrgencyTier, classify, days_until

__all__ = [
    "ChannelFailure", "ChannelResult", "ChannelSuccess", "EmailSender", "FailureKind", "SMSSender",
    "DueServiceNotifier", "RecipientOutcome", "RunSummary", "build_notifier",
    "AdminContact", "Recipient", "resolve_recipients",
    "Urgency", "UrgencyTier", "classify", "days_until",
]
