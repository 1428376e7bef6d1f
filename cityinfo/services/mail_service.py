"""
CityInfo API: Mail Services
===========================

What:  Concrete notification senders and the factory selecting one from settings.
How:   Both senders write the mail to the application log under the
       "cityinfo.mail" logger. No SMTP or provider integration exists yet.

Selection (MAIL_SERVICE):
    local → LocalMailService  (default, development)
    cloud → CloudMailService
"""

import logging

from cityinfo.config import Settings, settings
from cityinfo.services.mail_base import MailService

logger = logging.getLogger("cityinfo.mail")


class LocalMailService(MailService):
    """Development sender: logs the mail."""

    def send(self, subject: str, message: str) -> None:
        logger.info(
            "Mail from %s to %s, with LocalMailService.",
            self.mail_from_address,
            self.mail_to_address,
        )
        logger.info("Subject: %s", subject)
        logger.info("Message: %s", message)


class CloudMailService(MailService):
    """Production sender: logs the mail."""

    def send(self, subject: str, message: str) -> None:
        logger.info(
            "Mail from %s to %s, with CloudMailService.",
            self.mail_from_address,
            self.mail_to_address,
        )
        logger.info("Subject: %s", subject)
        logger.info("Message: %s", message)


def create_mail_service(config: Settings = settings) -> MailService:
    """Build the sender named by config.mail_service."""
    sender_class = CloudMailService if config.mail_service == "cloud" else LocalMailService
    return sender_class(
        mail_from_address=config.mail_from_address,
        mail_to_address=config.mail_to_address,
    )
