"""Feide OpenID Connect client interface (Port)"""

from abc import ABC, abstractmethod

import attrs


@attrs.define
class FeideUserInfo:
    feide_id: str
    name: str
    email: str
    secondary_user_ids: list[str] = attrs.field(factory=list)

    @property
    def first_name(self) -> str:
        return self.name.rsplit(' ', 1)[0] if ' ' in self.name else self.name

    @property
    def last_name(self) -> str:
        return self.name.rsplit(' ', 1)[1] if ' ' in self.name else ''


class IFeideClient(ABC):
    @abstractmethod
    def authorization_url(self, *, state: str, code_challenge: str) -> str:
        pass

    @abstractmethod
    async def fetch_user_info(self, *, code: str, code_verifier: str) -> FeideUserInfo:
        """Exchange the authorization code and fetch the Feide user info."""
        pass
