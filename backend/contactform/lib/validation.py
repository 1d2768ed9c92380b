import re
import logging

from contactform.lib.decoding import IncomingMessage

log = logging.getLogger("uvicorn.error")

EMAIL_RE = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))",
    re.ASCII,
)
TEXT_RE = re.compile(r"""[$!@&#%?'":,^a-z A-Z0-9_.-]*""", re.ASCII)

# Client only ever sees this; a failing field means the frontend checks were bypassed
INAPPROPRIATE_VALUE_MSG = "Request body contains an inappropriate value."


def validate_incoming_message(msg: IncomingMessage) -> bool:
    checks = (
        ("Email", EMAIL_RE, msg.email),
        ("Name", TEXT_RE, msg.name),
        ("Title", TEXT_RE, msg.title),
        ("Body", TEXT_RE, msg.body),
    )
    for field, pattern, value in checks:
        if not pattern.fullmatch(value):
            log.debug(f"[contact] rejected submission: {field} failed validation")
            return False
    return True
