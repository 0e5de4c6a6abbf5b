"""Delivery of podcast import requests."""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from pydantic import BaseModel, field_validator

from .config import NotificationConfig
from .consts import TIMEOUT_SMTP
from .errors import ExternalServiceError
from .i18n import gettext as _
from .validators import esc_url_raw, strip_all_tags

logger = logging.getLogger(__name__)


class ImportRequest(BaseModel):
    """A request to have an externally hosted podcast imported by hand."""

    name: str
    website: str
    email: str
    podcast_url: str

    @field_validator("name", "website", "email")
    @classmethod
    def strip_tags(cls, v: str) -> str:
        return strip_all_tags(v)

    @field_validator("podcast_url")
    @classmethod
    def check_url(cls, v: str) -> str:
        return esc_url_raw(v)

    @property
    def subject(self) -> str:
        return _("Podcast import request")

    def body(self) -> str:
        return "\n".join(
            [
                _("Hi,"),
                _(
                    "{name} (owner of {website}) would like your assistance with manually "
                    "importing their podcast from {podcast_url}."
                ).format(name=self.name, website=self.website, podcast_url=self.podcast_url),
                _("Please contact them at {email}.").format(email=self.email),
            ]
        )


class Notifier(Protocol):
    def notify(self, request: ImportRequest) -> None: ...


class ConsoleNotifier:
    def notify(self, request: ImportRequest) -> None:
        logger.info(f"{request.subject}\n{request.body()}")


class EmailNotifier:
    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_addr: str,
        recipient: list[str],
        starttls: bool = False,
        ssl: bool = False,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._from_addr = from_addr
        self._recipient = list(recipient)
        self._starttls = starttls
        self._ssl = ssl

    def notify(self, request: ImportRequest) -> None:
        mime_message = self._build_mime(request)
        self._send_mime(mime_message)
        logger.info(f"Import request sent for {request.website}")

    def _build_mime(self, request: ImportRequest) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = request.subject
        msg["From"] = self._from_addr
        msg["To"] = ", ".join(self._recipient)
        msg["Reply-To"] = request.email
        msg.attach(MIMEText(request.body(), "plain", "utf-8"))
        return msg

    def _send_mime(self, mime_message: MIMEMultipart) -> None:
        try:
            server = self._create_server()
            try:
                if self._user and self._password:
                    server.login(self._user, self._password)
                server.sendmail(
                    self._from_addr,
                    self._recipient,
                    mime_message.as_string(),
                )
            finally:
                server.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Failed to send import request: %s", e)
            raise ExternalServiceError(f"Import request email failed: {e}") from e

    def _create_server(self) -> smtplib.SMTP | smtplib.SMTP_SSL:
        if self._ssl:
            return smtplib.SMTP_SSL(self._host, self._port, timeout=TIMEOUT_SMTP)
        if self._starttls:
            server = smtplib.SMTP(self._host, self._port, timeout=TIMEOUT_SMTP)
            server.starttls()
            return server
        return smtplib.SMTP(self._host, self._port, timeout=TIMEOUT_SMTP)


def get_notifier(config: NotificationConfig) -> Notifier:
    if not config.enabled:
        return ConsoleNotifier()
    return EmailNotifier(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        from_addr=config.from_addr,
        recipient=config.recipient,
        starttls=config.starttls,
        ssl=config.ssl,
    )
