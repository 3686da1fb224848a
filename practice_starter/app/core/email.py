import logging
import smtplib
from email.message import EmailMessage

from practice_starter.app.core.config import Settings, get_settings

log = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Confirm your account"
VERIFICATION_BODY = (
    "Welcome! To activate your account, follow this link:\n"
    "{link}\n"
    "If you did not request this account, you can ignore this message."
)


class EmailService:
    """Sends account e-mails over SMTP.

    Without an SMTP host or a sender address the service runs in no-op mode
    and only logs what it would have sent.
    """

    def __init__(self, settings: Settings):
        self.host = settings.mail_host
        self.port = settings.mail_port
        self.username = settings.mail_username
        self.password = settings.mail_password
        self.use_tls = settings.mail_use_tls

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.username and self.username.strip())

    def send_verification_email(self, to_email: str, verification_link: str) -> None:
        """Send the account verification link.

        Args:
            to_email (str): Recipient address.
            verification_link (str): Absolute URL confirming the account.

        Notes:
            1. In no-op mode, log the link at INFO and return.
            2. Otherwise build a plain text message and send it through SMTP,
               upgrading with STARTTLS when enabled and logging in when a
               password is configured.
            3. Delivery failures are logged and never raised, so that a mail
               outage does not fail the registration.

        """
        if not self.enabled:
            _msg = f"Verification email (no-op) to={to_email} link={verification_link}"
            log.info(_msg)
            return

        message = EmailMessage()
        message["From"] = self.username
        message["To"] = to_email
        message["Subject"] = VERIFICATION_SUBJECT
        message.set_content(VERIFICATION_BODY.format(link=verification_link))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as server:
                if self.use_tls:
                    server.starttls()
                if self.password:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            _msg = f"Failed to send email to {to_email}: {e}"
            log.warning(_msg)
            return

        _msg = f"Verification email sent to {to_email}"
        log.info(_msg)


def get_email_service() -> EmailService:
    """FastAPI dependency returning an e-mail service built from the settings."""
    return EmailService(get_settings())
