import smtplib
import socket
import ssl
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional, Protocol
import logging
from db.repositories.settings_repository import ADMIN_EMAIL, ADMIN_PASSWORD

logger = logging.getLogger(__name__)

SECURITY_MODES = ("starttls", "ssl", "none")

TEST_SUBJECT = "Website Monitor - Test Email"
TEST_BODY = (
    "This is a test email from the Website Monitor application.\n\n"
    "If you received this, your email settings appear to be configured correctly."
)


class CredentialSource(Protocol):
    def get_credential(self, key: str) -> Optional[str]: ...


class EmailService:
    """
    Sends plain-text notification emails through an SMTP relay.

    The relay (host, port, security mode) is fixed at construction. The
    mailbox used to log in, and to send from and to, is looked up on every
    send so credential changes take effect on the next notification.
    """

    def __init__(self, config: dict, credential_provider: Optional[CredentialSource] = None):
        """
        Initializes the EmailService with configuration.

        Args:
            config (dict): Mail relay configuration.
                           Expected keys:
                           - 'SMTP_HOST': SMTP server hostname (e.g., smtp.gmail.com)
                           - 'SMTP_PORT': SMTP server port (e.g., 587 for STARTTLS, 465 for SSL)
                           - 'SMTP_SECURITY': 'starttls' (default), 'ssl' or 'none'
                           - 'SMTP_TIMEOUT': Socket timeout in seconds (default: 30)
                           - 'SENDER_NAME': Display name used in the From header
            credential_provider: Source of the ADMIN_EMAIL and ADMIN_PASSWORD
                           settings. Only required by send_notification.
        """
        required_keys = ["SMTP_HOST", "SMTP_PORT"]
        if not all(config.get(k) for k in required_keys):
            raise ValueError(
                f"Config must contain: {', '.join(required_keys)}"
            )

        security = (config.get("SMTP_SECURITY") or "starttls").lower()
        if security not in SECURITY_MODES:
            raise ValueError(
                f"SMTP_SECURITY must be one of: {', '.join(SECURITY_MODES)}"
            )

        self.config = config
        self.smtp_host = config["SMTP_HOST"]
        self.smtp_port = int(config["SMTP_PORT"])
        self.security = security
        self.timeout = float(config.get("SMTP_TIMEOUT") or 30)
        self.sender_name = config.get("SENDER_NAME") or "Website Monitor"
        self.credential_provider = credential_provider

    def send_notification(self, subject: str, body: str) -> None:
        """
        Email the configured admin. Never raises.

        A missing admin email or password means notifications are switched
        off; that is logged and the call returns without sending.
        """
        logger.info(f"Attempting to send email: {subject}")
        try:
            if self.credential_provider is None:
                logger.warning("No credential provider configured. Cannot send notification.")
                return
            admin_email = self.credential_provider.get_credential(ADMIN_EMAIL)
            admin_password = self.credential_provider.get_credential(ADMIN_PASSWORD)

            if not admin_email or not admin_password:
                logger.warning("Admin email or password not configured. Cannot send notification.")
                return

            self._send(admin_email, admin_password, admin_email, subject, body)
            logger.info(f"Notification email sent successfully to {admin_email}")
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed sending notification: {str(e)}")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error sending notification: {str(e)}")
        except Exception as e:
            logger.exception(f"Failed to send notification email: {str(e)}")

    def send_test_email(self, email: str, password: str) -> tuple[bool, str]:
        """
        Sends a test message with caller-supplied credentials.

        Args:
            email (str): Mailbox to authenticate as; also the recipient.
            password (str): Password or app password for that mailbox.

        Returns:
            tuple[bool, str]: A tuple containing a boolean indicating success
                              and a message describing the outcome.
        """
        logger.info(f"Attempting to send TEST email to: {email}")
        if not email or not password:
            logger.error("Test email failed: Email or Password missing.")
            return False, "Email address and password are required to send a test email."

        try:
            self._send(email, password, email, TEST_SUBJECT, TEST_BODY,
                       sender_name=f"{self.sender_name} Test")
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"Error sending test email: {str(e)}")
            return False, (
                "Failed to send test email: Authentication failed. "
                "Check email/password (use an app password if applicable)."
            )
        except (ConnectionRefusedError, socket.timeout, TimeoutError,
                smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as e:
            logger.error(f"Error sending test email: {str(e)}")
            return False, (
                "Failed to send test email: Connection failed. "
                "Check SMTP host/port and firewall settings."
            )
        except Exception as e:
            logger.exception(f"Error sending test email: {str(e)}")
            return False, f"Failed to send test email: {str(e)}"

        logger.info(f"Test email sent successfully to {email}")
        return True, f"Test email sent successfully to {email}."

    def _send(
        self,
        username: str,
        password: str,
        to_email: str,
        subject: str,
        body: str,
        sender_name: Optional[str] = None,
    ) -> None:
        message = MIMEText(body, "plain", "utf-8")
        message["Subject"] = subject
        message["From"] = formataddr((sender_name or self.sender_name, username))
        message["To"] = to_email

        context = ssl.create_default_context()

        if self.security == "ssl":
            with smtplib.SMTP_SSL(
                self.smtp_host, self.smtp_port, context=context, timeout=self.timeout
            ) as server:
                server.login(username, password)
                server.send_message(message)
        else:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.security == "starttls":
                    server.starttls(context=context)
                server.login(username, password)
                server.send_message(message)
