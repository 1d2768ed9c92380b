# contactform/core/mailer.py
import asyncio
import logging
import smtplib
from dataclasses import dataclass

from contactform.core.settings import Settings
from contactform.lib.decoding import IncomingMessage

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class SmtpRelay:
    host: str
    port: int
    username: str
    password: str

    @classmethod
    def from_settings(cls, s: Settings) -> "SmtpRelay":
        return cls(
            host=s.smtp_host,
            port=s.smtp_port,
            username=s.public_email,
            password=s.public_email_password.get_secret_value(),
        )

    def send(self, to_addr: str, message: bytes) -> None:
        """Submit one raw message to the relay. No retry."""
        with smtplib.SMTP(self.host, self.port) as smtp:
            smtp.ehlo()
            # SMTPNotSupportedError if the relay does not offer STARTTLS
            smtp.starttls()
            smtp.ehlo()
            smtp.login(self.username, self.password)
            smtp.sendmail(self.username, [to_addr], message)


@dataclass(frozen=True)
class DeliveryOutcome:
    reply_sent: bool
    forward_sent: bool


def _attempt(relay: SmtpRelay, label: str, to_addr: str, message: bytes, msg: IncomingMessage) -> bool:
    try:
        relay.send(to_addr, message)
        return True
    except Exception as exc:
        # No retry queue, so keep everything needed to follow up by hand
        log.error(
            f"[mailer] {label} message failed! Email: {msg.email}, Name: {msg.name}, "
            f"Subject: {msg.title}, Body: {msg.body}"
        )
        log.error(f"[mailer] {label} error: {exc}")
        return False


def _deliver(relay: SmtpRelay, msg: IncomingMessage, reply: bytes, forward: bytes, operator_email: str) -> DeliveryOutcome:
    reply_sent = _attempt(relay, "Reply", msg.email, reply, msg)
    forward_sent = _attempt(relay, "Forward", operator_email, forward, msg)
    return DeliveryOutcome(reply_sent=reply_sent, forward_sent=forward_sent)


async def deliver_submission(
    relay: SmtpRelay,
    msg: IncomingMessage,
    reply: bytes,
    forward: bytes,
    operator_email: str,
) -> DeliveryOutcome:
    """Send the reply to the submitter, then the forward to the operator.

    The attempts are independent; one failing does not stop the other.
    """
    return await asyncio.to_thread(_deliver, relay, msg, reply, forward, operator_email)
