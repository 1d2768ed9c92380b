"""Raw outbound email construction.

Messages are assembled by hand so the multipart layout is byte-for-byte
predictable. Every line ends in CRLF; do not change the separators without
checking the result in a real mail client.
"""
import re
from typing import List, Optional, Tuple

from jinja2 import Template

from contactform.core.templates import render_reply_html
from contactform.lib.decoding import IncomingMessage

CRLF = "\r\n"
BOUNDARY = "boundary123"

Header = Tuple[str, str]


def sanitize_header_value(value: str) -> str:
    return value.replace("\r", "").replace("\n", "").strip()


def _to_crlf(text: str) -> str:
    return re.sub(r"\r\n|\r|\n", CRLF, text)


def format_address(name: str, address: str) -> str:
    return f"{name} <{address}>"


def render_headers(headers: List[Header]) -> str:
    return "".join(f"{key}: {sanitize_header_value(value)}{CRLF}" for key, value in headers)


def reply_plain_text(name: str, operator_name: str) -> str:
    return (
        f"Hi {name},{CRLF}{CRLF}"
        f"Thank you for contacting me! I will get back to you soon.{CRLF}{CRLF}"
        f"Sincerely,{CRLF}"
        f"{operator_name}{CRLF}"
    )


def build_reply_message(
    msg: IncomingMessage,
    from_email: str,
    operator_name: str,
    template: Optional[Template],
) -> bytes:
    """Thank-you email for the submitter: plain text plus, when the template renders, HTML."""
    headers: List[Header] = [
        ("From", format_address(operator_name, from_email)),
        ("To", format_address(msg.name, msg.email)),
        ("Subject", f"You Contacted {operator_name}"),
        ("MIME-Version", "1.0"),
        ("Content-Type", f'multipart/alternative; boundary="{BOUNDARY}"'),
    ]

    parts = [
        ("text/plain; charset=us-ascii", reply_plain_text(msg.name, operator_name)),
    ]
    html = render_reply_html(template, msg.name, operator_name)
    if html is not None:
        parts.append(("text/html; charset=utf-8", _to_crlf(html)))

    out = render_headers(headers) + CRLF
    for content_type, body in parts:
        out += f"--{BOUNDARY}{CRLF}Content-Type: {content_type}{CRLF}{CRLF}{body}"
        if not body.endswith(CRLF):
            out += CRLF
    out += f"--{BOUNDARY}--{CRLF}"
    return out.encode("utf-8")


def build_forward_message(
    msg: IncomingMessage,
    to_email: str,
    from_email: str,
    operator_name: str,
) -> bytes:
    headers: List[Header] = [
        ("From", format_address(operator_name, from_email)),
        ("To", format_address(operator_name, to_email)),
        ("Subject", f"Important: Contact Form Submission from {msg.name}"),
        ("MIME-Version", "1.0"),
        ("Content-Type", 'text/plain; charset="utf-8"'),
    ]
    body = (
        f"{msg.name} at {msg.email} sent the following:{CRLF}{CRLF}"
        f"{msg.title}{CRLF}{CRLF}"
        f"{msg.body}{CRLF}"
    )
    return (render_headers(headers) + CRLF + body).encode("utf-8")
