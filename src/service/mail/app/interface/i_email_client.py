from abc import ABC, abstractmethod

from src.service.mail.domain.email_entity import EmailContent


class IEmailClient(ABC):
    @abstractmethod
    async def send(self, *, email: EmailContent) -> None:
        """
        Raises:
            DownstreamServiceError: the mail provider rejected or did not answer
        """
        pass
