"""
CityInfo API: Abstract Mail Service Interface
=============================================

What:  Contract for the notification sender invoked after a point of interest
       is deleted.
How:   Concrete senders inherit from MailService and implement send().
Who:   Scheduled by the DELETE handler as a background task, after the
       response is produced (fire-and-forget: no delivery guarantee, no retry).

Implementations:
    - LocalMailService: development sender
    - CloudMailService: production sender
"""

from abc import ABC, abstractmethod


class MailService(ABC):
    """Sends a subject/message notification from and to configured addresses."""

    def __init__(self, mail_from_address: str, mail_to_address: str):
        self.mail_from_address = mail_from_address
        self.mail_to_address = mail_to_address

    @abstractmethod
    def send(self, subject: str, message: str) -> None:
        """
        Deliver one notification.

        Args:
            subject: Short subject line, e.g. "Point of interest deleted."
            message: Body text.
        """
        ...
