"""
Reminder recipients: the configured admin contact, then the customer.
"""
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class AdminContact:
    phone: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "AdminContact":
        return cls(phone=settings.admin_phone or None, email=settings.admin_email or None)

    @property
    def configured(self) -> bool:
        return bool(self.phone or self.email)


@dataclass(frozen=True)
class Recipient:
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


def resolve_recipients(customer, admin: AdminContact) -> List[Recipient]:
    recipients = []
    if admin.configured:
        recipients.append(Recipient("Admin", admin.phone, admin.email))
    recipients.append(Recipient(customer.name, customer.phone or None, customer.email or None))
    return recipients
