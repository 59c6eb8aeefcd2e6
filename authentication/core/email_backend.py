"""
SMTP email backend with retry logic and admin-configurable credentials
"""
import logging
import smtplib
import time
from django.conf import settings
from django.core.mail.backends.smtp import EmailBackend as DjangoEmailBackend

logger = logging.getLogger(__name__)


class RobustSMTPEmailBackend(DjangoEmailBackend):
    """
    SMTP backend that:
    - takes host/port/credentials from the ``smtp`` settings group when it is enabled
    - retries connection failures with a fixed delay
    - logs every failure with the recipient list
    """

    def __init__(self, *args, **kwargs):
        smtp_config = self._load_site_smtp_config()
        if smtp_config:
            kwargs.setdefault('host', smtp_config['host'])
            kwargs.setdefault('port', smtp_config['port'])
            kwargs.setdefault('username', smtp_config['username'])
            kwargs.setdefault('password', smtp_config['password'])
            kwargs.setdefault('use_ssl', smtp_config['port'] == 465)
            kwargs.setdefault('use_tls', smtp_config['port'] != 465)
        super().__init__(*args, **kwargs)
        self.max_retries = getattr(settings, 'EMAIL_CONNECTION_RETRY_ATTEMPTS', 3)
        self.retry_delay = getattr(settings, 'EMAIL_CONNECTION_RETRY_DELAY', 2)

    @staticmethod
    def _load_site_smtp_config():
        # Imported lazily: the backend is constructed before apps are always ready.
        try:
            from configuration.services import SettingsService
            return SettingsService.get_smtp_config()
        except Exception as e:
            logger.warning(f"Could not load SMTP settings from database: {str(e)}")
            return None

    def open(self):
        """Open the SMTP connection, retrying transient failures"""
        if self.connection is not None:
            return False

        for attempt in range(1, self.max_retries + 1):
            try:
                return super().open()
            except (smtplib.SMTPException, OSError) as e:
                logger.warning(
                    f"SMTP connection error on attempt {attempt}/{self.max_retries} to {self.host}:{self.port}: {str(e)}"
                )
                self.connection = None
                if attempt == self.max_retries:
                    logger.error(f"Failed to establish SMTP connection after {self.max_retries} attempts")
                    raise
                time.sleep(self.retry_delay)
        return False

    def send_messages(self, email_messages):
        if not email_messages:
            return 0
        try:
            return super().send_messages(email_messages)
        except (smtplib.SMTPException, OSError) as e:
            recipients = [addr for message in email_messages for addr in message.to]
            logger.error(f"SMTP error sending to {recipients}: {str(e)}")
            self.close()
            raise
