"""Email delivery.

Two transports:
  client  - authenticated relay through the configured SMTP server
  direct  - delivery straight to the recipient's MX hosts (needs SPF/DKIM
            records for the sender domain to be accepted by most providers)
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid

import dns.exception
import dns.resolver

from partyhub.config import settings

logger = logging.getLogger(__name__)


class MailError(Exception):
    """Raised when a message could not be handed to any server."""


def build_message(to_name: str, to_email: str, subject: str, body: str) -> EmailMessage:
    from_domain = settings.smtp_from.rsplit("@", 1)[-1].rstrip(">") if settings.smtp_from else "localhost"

    msg = EmailMessage()
    msg["From"] = settings.smtp_from
    msg["To"] = formataddr((to_name, to_email)) if to_name else to_email
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid(domain=from_domain)
    msg.set_content(body)
    return msg


def send_via_client(msg: EmailMessage) -> None:
    """Send through the configured relay (implicit TLS on 465, STARTTLS otherwise)."""
    context = ssl.create_default_context()
    if settings.smtp_port == 465:
        server = smtplib.SMTP_SSL(
            settings.smtp_server, settings.smtp_port, timeout=settings.smtp_timeout, context=context
        )
    else:
        server = smtplib.SMTP(settings.smtp_server, settings.smtp_port, timeout=settings.smtp_timeout)
    with server:
        if settings.smtp_port != 465:
            server.starttls(context=context)
        server.login(settings.smtp_username, settings.smtp_password)
        server.send_message(msg)


def get_mx_hosts(domain: str) -> list[str]:
    """MX hosts for a domain, most preferred first."""
    try:
        answers = dns.resolver.resolve(domain, "MX")
    except dns.exception.DNSException as e:
        raise MailError(f"Failed to resolve MX records for {domain}: {e}") from e
    records = sorted(answers, key=lambda r: r.preference)
    return [str(r.exchange).rstrip(".") for r in records]


def send_direct(msg: EmailMessage, to_email: str) -> None:
    """Deliver to the recipient's own mail servers, trying each MX in order."""
    if "@" not in to_email:
        raise MailError(f"Invalid recipient address: {to_email}")
    domain = to_email.rsplit("@", 1)[1]
    hosts = get_mx_hosts(domain)
    if not hosts:
        raise MailError(f"No MX records found for {domain}")

    last_error = None
    for host in hosts:
        try:
            with smtplib.SMTP(host, 25, timeout=settings.smtp_timeout) as server:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
                server.send_message(msg)
            return
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("MX host %s refused mail for %s: %s", host, to_email, e)
            last_error = e
    raise MailError(f"All MX hosts failed for {domain}: {last_error}")


def send_email(to_name: str, to_email: str, subject: str, body: str) -> bool:
    """Send one email with the configured transport.

    Returns False when email is disabled. Delivery errors propagate.
    """
    method = settings.mail_method
    if method is None:
        return False

    msg = build_message(to_name, to_email, subject, body)
    if method == "client":
        send_via_client(msg)
    else:
        send_direct(msg, to_email)
    return True
