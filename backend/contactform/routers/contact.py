# contactform/routers/contact.py
import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from contactform.core.mailer import deliver_submission
from contactform.lib.decoding import DecodeError, decode_json_body
from contactform.lib.messages import build_forward_message, build_reply_message
from contactform.lib.validation import INAPPROPRIATE_VALUE_MSG, validate_incoming_message

router = APIRouter(prefix="/api/v1", tags=["contact"])
log = logging.getLogger("uvicorn.error")


def _success_response(success: bool) -> Response:
    try:
        payload = json.dumps({"Success": success})
    except (TypeError, ValueError) as exc:
        log.error(f"[contact] could not encode response: {exc}")
        if success:
            return PlainTextResponse("Success")
        return PlainTextResponse("Error", status_code=500)
    return Response(content=payload, media_type="application/json")


@router.post("/contactFormEmail")
async def contact_form_email(request: Request):
    """Acknowledge a contact form submission and forward it to the operator."""
    try:
        incoming = await decode_json_body(request.headers.get("content-type"), request.stream())
    except DecodeError as exc:
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    except Exception as exc:
        log.error(f"[contact] unexpected error decoding request body: {exc}")
        return PlainTextResponse("Internal Server Error", status_code=500)

    if not validate_incoming_message(incoming):
        return PlainTextResponse(INAPPROPRIATE_VALUE_MSG, status_code=400)

    state = request.app.state
    cfg = state.settings
    reply = build_reply_message(incoming, cfg.public_email, cfg.operator_name, state.reply_template)
    forward = build_forward_message(incoming, cfg.private_email, cfg.public_email, cfg.operator_name)

    outcome = await deliver_submission(state.relay, incoming, reply, forward, cfg.private_email)
    return _success_response(outcome.reply_sent)
