# contactform/core/settings.py
from pathlib import Path
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "templates" / "thank_you_email.html"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Contact Form API", alias="API_TITLE")

    # Comma delimited, e.g. "https://example.com,https://www.example.com"
    allowed_origins: str = Field(min_length=1, alias="ALLOWED_ORIGINS")
    port: int = Field(alias="PORT")

    # Account used to log in to the relay and send both emails
    public_email: str = Field(min_length=1, alias="PUBLIC_EMAIL")
    public_email_password: SecretStr = Field(alias="PUBLIC_EMAIL_PASSWORD")
    # Private mailbox that receives forwarded submissions
    private_email: str = Field(min_length=1, alias="PRIVATE_EMAIL")

    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")

    # Display name used in From/To headers and the reply text
    operator_name: str = Field(default="Site Owner", alias="OPERATOR_NAME")

    # If unset we use the template bundled with the package
    reply_template_path: Optional[str] = Field(default=None, alias="REPLY_TEMPLATE_PATH")

    @field_validator("public_email_password")
    @classmethod
    def _password_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("PUBLIC_EMAIL_PASSWORD must not be empty")
        return value

    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def template_path(self) -> Path:
        if self.reply_template_path:
            return Path(self.reply_template_path).expanduser().resolve()
        return DEFAULT_TEMPLATE_PATH

settings = Settings()
