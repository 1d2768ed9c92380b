# contactform/main.py
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contactform.core.mailer import SmtpRelay
from contactform.core.settings import settings
from contactform.core.templates import load_reply_template
from contactform.routers.contact import router as contact_router
from contactform.routers.health import router as health_router

app = FastAPI(title=settings.api_title)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins(),
    allow_credentials=True,
    allow_methods=["POST"],
    allow_headers=["Origin", "Accept", "Content-Type", "X-Requested-With"],
)

# Built once here and only read by request handlers
app.state.settings = settings
app.state.relay = SmtpRelay.from_settings(settings)
app.state.reply_template = load_reply_template(settings.template_path())

logging.getLogger("uvicorn.error").info(
    f"[main] relay = {settings.smtp_host}:{settings.smtp_port}, html replies = {app.state.reply_template is not None}"
)

# Routers
app.include_router(contact_router)
app.include_router(health_router)


def run():
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
