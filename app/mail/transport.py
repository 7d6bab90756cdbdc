"""Mail delivery.

Transports are built explicitly from settings and passed to whoever sends
mail, so tests can substitute a recording fake. When SMTP is not fully
configured, ``ConsoleTransport`` logs messages instead of sending them.
"""
import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Protocol

from app.core.config import Settings
from app.core.errors import DeliveryFailure

logger = logging.getLogger(__name__)

MOCK_MESSAGE_ID = "mock-message-id"


@dataclass(frozen=True)
class MailAttachment:
    """An inline image referenced from the HTML body as ``cid:<cid>``."""

    filename: str
    content: bytes
    cid: str
    mime_type: str = "image/png"


@dataclass
class OutgoingMail:
    to: str
    subject: str
    html: str
    attachments: list[MailAttachment] = field(default_factory=list)


@dataclass(frozen=True)
class SendResult:
    message_id: str


class MailTransport(Protocol):
    def send(self, mail: OutgoingMail) -> SendResult: ...


def build_message(mail: OutgoingMail, sender: str) -> EmailMessage:
    """Build a MIME message with the attachments embedded as related parts."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = mail.to
    message["Subject"] = mail.subject
    message["Message-ID"] = make_msgid()

    message.set_content("This message contains your ticket. Please view it in an HTML capable client.")
    message.add_alternative(mail.html, subtype="html")

    html_part = message.get_payload()[-1]
    for attachment in mail.attachments:
        maintype, subtype = attachment.mime_type.split("/", 1)
        html_part.add_related(
            attachment.content,
            maintype=maintype,
            subtype=subtype,
            cid=f"<{attachment.cid}>",
            filename=attachment.filename,
        )
    return message


class SMTPTransport:
    """Send mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        use_ssl: bool = True,
        from_name: str = "",
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_ssl = use_ssl
        self.sender = formataddr((from_name, user)) if from_name else user
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        client = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        client.starttls()
        return client

    def send(self, mail: OutgoingMail) -> SendResult:
        message = build_message(mail, self.sender)
        try:
            with self._connect() as client:
                client.login(self.user, self.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {mail.to} failed: {e}")
            raise DeliveryFailure(f"Failed to deliver mail to {mail.to}: {e}") from e

        logger.info(f"Sent '{mail.subject}' to {mail.to}")
        return SendResult(message_id=message["Message-ID"])


class ConsoleTransport:
    """Log mail instead of sending it."""

    def send(self, mail: OutgoingMail) -> SendResult:
        logger.info(
            f"SMTP not configured, not sending '{mail.subject}' to {mail.to} "
            f"({len(mail.attachments)} attachments)"
        )
        return SendResult(message_id=MOCK_MESSAGE_ID)


def build_transport(settings: Settings) -> MailTransport:
    """Pick the SMTP transport when fully configured, else the console one."""
    if not settings.smtp_configured:
        return ConsoleTransport()
    return SMTPTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_pass,
        use_ssl=settings.smtp_use_ssl,
        from_name=settings.mail_from_name or settings.app_name,
    )
