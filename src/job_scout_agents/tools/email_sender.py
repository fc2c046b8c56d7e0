"""Report delivery via SMTP or SendGrid."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from email.mime.multipart import MIMEMultipart
from pathlib import Path

import structlog

from job_scout_core.exceptions import EmailDeliveryError

logger = structlog.get_logger()

_XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_CSV_MIME = "text/csv"
_DEFAULT_SENDER = "noreply@job-scout.dev"


def _mime_type(path: Path) -> str:
    if path.suffix == ".xlsx":
        return _XLSX_MIME
    if path.suffix == ".csv":
        return _CSV_MIME
    return "application/octet-stream"


class EmailSender:
    """Send a run report through SMTP (aiosmtplib) or the SendGrid API."""

    def __init__(
        self,
        provider: str = "smtp",
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        sendgrid_api_key: str = "",
    ) -> None:
        """Initialize with email provider configuration."""
        self._provider = provider
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password
        self._sendgrid_api_key = sendgrid_api_key

    @property
    def sender(self) -> str:
        """From address used for outgoing reports."""
        return self._smtp_user or _DEFAULT_SENDER

    async def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
        attachments: Sequence[Path] = (),
    ) -> bool:
        """Send a report; raises EmailDeliveryError on any provider failure."""
        files = [p for p in attachments if p.exists()]
        try:
            if self._provider == "sendgrid":
                return await self._send_sendgrid(to_email, subject, html_body, text_body, files)
            return await self._send_smtp(to_email, subject, html_body, text_body, files)
        except EmailDeliveryError:
            raise
        except Exception as e:
            logger.error("email_send_failed", to=to_email, provider=self._provider, error=str(e))
            raise EmailDeliveryError(str(e)) from e

    async def _send_smtp(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
        files: list[Path],
    ) -> bool:
        """Send via SMTP using aiosmtplib."""
        import aiosmtplib

        msg = await asyncio.to_thread(
            self.build_message, to_email, subject, html_body, text_body, files
        )
        await aiosmtplib.send(
            msg,
            hostname=self._smtp_host,
            port=self._smtp_port,
            username=self._smtp_user or None,
            password=self._smtp_password or None,
            start_tls=True,
        )
        logger.info("email_sent_smtp", to=to_email, attachments=len(files))
        return True

    def build_message(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
        files: Sequence[Path] = (),
    ) -> MIMEMultipart:
        """Build the MIME message (sync, runs in thread)."""
        from email.mime.application import MIMEApplication
        from email.mime.text import MIMEText

        msg = MIMEMultipart("mixed")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to_email

        alt = MIMEMultipart("alternative")
        alt.attach(MIMEText(text_body, "plain"))
        alt.attach(MIMEText(html_body, "html"))
        msg.attach(alt)

        for path in files:
            _, subtype = _mime_type(path).split("/", 1)
            part = MIMEApplication(path.read_bytes(), _subtype=subtype)
            part.add_header("Content-Disposition", "attachment", filename=path.name)
            msg.attach(part)

        return msg

    async def _send_sendgrid(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
        files: list[Path],
    ) -> bool:
        """Send via SendGrid API."""

        def _send() -> bool:
            import base64

            from sendgrid import SendGridAPIClient
            from sendgrid.helpers.mail import (
                Attachment,
                Content,
                Disposition,
                Email,
                FileContent,
                FileName,
                FileType,
                Mail,
                To,
            )

            message = Mail(
                from_email=Email(self.sender),
                to_emails=To(to_email),
                subject=subject,
            )
            message.content = [
                Content("text/plain", text_body),
                Content("text/html", html_body),
            ]
            for path in files:
                data = base64.b64encode(path.read_bytes()).decode()
                message.add_attachment(
                    Attachment(
                        FileContent(data),
                        FileName(path.name),
                        FileType(_mime_type(path)),
                        Disposition("attachment"),
                    )
                )

            response = SendGridAPIClient(self._sendgrid_api_key).send(message)
            if response.status_code not in (200, 201, 202):
                msg = f"SendGrid rejected report: HTTP {response.status_code}"
                raise EmailDeliveryError(msg)
            return True

        result = await asyncio.to_thread(_send)
        logger.info("email_sent_sendgrid", to=to_email, attachments=len(files))
        return result
