"""
Delivery channels for service reminders.

Each sender wraps one external transport and reports every outcome as a
``ChannelResult``. Senders never raise: missing credentials, rejected
messages and transport errors all come back as ``ChannelFailure``.
"""
import asyncio
import enum
import logging
import re
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from html import escape
from typing import Optional, Union

import httpx

logger = logging.getLogger(__name__)


class FailureKind(str, enum.Enum):
    """Why a channel could not deliver."""
    NOT_CONFIGURED = "not_configured"
    INVALID_RECIPIENT = "invalid_recipient"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class ChannelSuccess:
    """Message accepted by the provider."""
    provider: str
    message_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class ChannelFailure:
    """Message not delivered."""
    kind: FailureKind
    detail: str
    provider: Optional[str] = None

    @property
    def success(self) -> bool:
        return False

    @property
    def error(self) -> str:
        return self.detail


ChannelResult = Union[ChannelSuccess, ChannelFailure]


class SMSSender:
    """
    SMS delivery through the Fast2SMS bulk API.

    Fast2SMS only accepts 10-digit Indian mobile numbers, so numbers are
    normalised before sending and anything that does not reduce to ten
    digits is refused locally.
    """

    provider = "Fast2SMS"

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://www.fast2sms.com/dev/bulkV2",
        sender_id: str = "TXTIND",
        max_length: int = 500,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.sender_id = sender_id
        self.max_length = max_length
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings) -> "SMSSender":
        return cls(
            api_key=settings.fast2sms_api_key,
            api_url=settings.sms_api_url,
            sender_id=settings.sms_sender_id,
            max_length=settings.sms_max_length,
            timeout=settings.channel_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Drop a leading +91 country code and every non-digit."""
        return re.sub(r"\D", "", re.sub(r"^\+91", "", phone.strip()))

    async def send(self, phone: str, message: str) -> ChannelResult:
        if not self.enabled:
            logger.warning("⚠️  SMS gateway not configured")
            return ChannelFailure(
                FailureKind.NOT_CONFIGURED, "SMS gateway API key not configured", self.provider
            )

        number = self.normalize_phone(phone)
        if len(number) != 10:
            return ChannelFailure(
                FailureKind.INVALID_RECIPIENT, f"Invalid phone number format: {phone}", self.provider
            )

        payload = {
            "route": "v3",
            "sender_id": self.sender_id,
            "message": message[: self.max_length],
            "language": "english",
            "flash": 0,
            "numbers": number,
        }
        headers = {"authorization": self.api_key, "Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
            data = response.json()
        except httpx.TimeoutException:
            logger.error("❌ SMS gateway timed out sending to %s", number)
            return ChannelFailure(
                FailureKind.TRANSPORT_ERROR,
                f"SMS gateway timed out after {self.timeout:g}s",
                self.provider,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error("❌ SMS gateway error: %s", e)
            return ChannelFailure(FailureKind.TRANSPORT_ERROR, str(e) or type(e).__name__, self.provider)
        except Exception as e:
            logger.exception("❌ Unexpected SMS transport error")
            return ChannelFailure(FailureKind.TRANSPORT_ERROR, str(e) or type(e).__name__, self.provider)

        if isinstance(data, dict) and data.get("return") is True:
            logger.info("✅ SMS sent to %s via %s", number, self.provider)
            return ChannelSuccess(self.provider, data.get("request_id"))

        detail = data.get("message") if isinstance(data, dict) else None
        if isinstance(detail, list):
            detail = "; ".join(str(item) for item in detail)
        detail = detail or f"HTTP {response.status_code}"
        logger.warning("❌ %s rejected SMS to %s: %s", self.provider, number, detail)
        return ChannelFailure(FailureKind.REJECTED, str(detail), self.provider)


EMAIL_HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">RO Service Reminder</h2>
  <div style="background: #f3f4f6; padding: 20px; border-radius: 8px;">
    <pre style="white-space: pre-wrap; font-family: monospace;">{body}</pre>
  </div>
  <p style="color: #6b7280; font-size: 12px; margin-top: 20px;">
    This is an automated message from RO Maintenance System
  </p>
</div>
"""


class EmailSender:
    """Email delivery over an authenticated SMTP relay (Gmail by default)."""

    provider = "Gmail"

    def __init__(
        self,
        user: Optional[str],
        password: Optional[str],
        host: str = "smtp.gmail.com",
        port: int = 587,
        timeout: float = 10.0,
        sender_name: str = "RO Service",
    ):
        self.user = user
        self.password = password
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sender_name = sender_name

    @classmethod
    def from_settings(cls, settings) -> "EmailSender":
        return cls(
            user=settings.gmail_user,
            password=settings.gmail_app_password,
            host=settings.smtp_host,
            port=settings.smtp_port,
            timeout=settings.channel_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.user and self.password)

    def build_message(self, to: str, subject: str, message: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((self.sender_name, self.user))
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.user.rsplit("@", 1)[-1])
        msg.set_content(message)
        msg.add_alternative(EMAIL_HTML_TEMPLATE.format(body=escape(message)), subtype="html")
        return msg

    async def send(self, to: str, subject: str, message: str) -> ChannelResult:
        if not self.enabled:
            logger.warning("⚠️  Email relay not configured")
            return ChannelFailure(
                FailureKind.NOT_CONFIGURED, "Email credentials not configured", self.provider
            )

        try:
            msg = self.build_message(to, subject, message)
            await asyncio.to_thread(self._deliver, msg)
        except (
            smtplib.SMTPRecipientsRefused,
            smtplib.SMTPSenderRefused,
            smtplib.SMTPDataError,
        ) as e:
            logger.warning("❌ %s rejected email to %s: %s", self.provider, to, e)
            return ChannelFailure(FailureKind.REJECTED, str(e), self.provider)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("❌ Email transport error: %s", e)
            return ChannelFailure(FailureKind.TRANSPORT_ERROR, str(e) or type(e).__name__, self.provider)
        except Exception as e:
            logger.exception("❌ Unexpected email transport error")
            return ChannelFailure(FailureKind.TRANSPORT_ERROR, str(e) or type(e).__name__, self.provider)

        logger.info("✅ Email sent to %s via %s", to, self.provider)
        return ChannelSuccess(self.provider, msg["Message-ID"])

    def _deliver(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(msg)
