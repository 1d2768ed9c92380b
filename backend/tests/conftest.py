import os

# Settings are read when contactform.core.settings is imported
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000,https://example.com")
os.environ.setdefault("PORT", "8080")
os.environ.setdefault("PUBLIC_EMAIL", "site@example.com")
os.environ.setdefault("PUBLIC_EMAIL_PASSWORD", "app-password")
os.environ.setdefault("PRIVATE_EMAIL", "owner@example.com")
os.environ.setdefault("OPERATOR_NAME", "Site Owner")
