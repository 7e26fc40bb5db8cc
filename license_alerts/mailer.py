import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from license_alerts.config import EmailConfig

logger = logging.getLogger(__name__)


class SMTPMailer:
    """Sends one message per connection; failures propagate to the caller."""

    def __init__(self, config: EmailConfig):
        self.config = config

    def _connect(self) -> smtplib.SMTP:
        if self.config.use_ssl:
            smtp = smtplib.SMTP_SSL(self.config.smtp_host, self.config.smtp_port, timeout=self.config.timeout)
        else:
            smtp = smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=self.config.timeout)
            if self.config.use_tls:
                smtp.starttls()

        if self.config.smtp_username:
            smtp.login(self.config.smtp_username, self.config.smtp_password)
        return smtp

    def send_email(self, to: str, sender: str, subject: str, html: str, text: str | None = None) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = to

        if text:
            msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        smtp = self._connect()
        try:
            smtp.send_message(msg, from_addr=sender, to_addrs=[to])
        finally:
            smtp.quit()

        logger.debug("Email sent to %s", to)
