"""Login state store interface (Port)

Holds the PKCE verifier and redirect url between the authorize redirect and
the callback. Entries are single use.
"""

from abc import ABC, abstractmethod
from typing import Optional

import attrs


@attrs.define
class LoginState:
    code_verifier: str
    redirect: Optional[str] = None


class IAuthStateStore(ABC):
    @abstractmethod
    async def save(self, *, state: str, login_state: LoginState) -> None:
        pass

    @abstractmethod
    async def pop(self, *, state: str) -> Optional[LoginState]:
        pass
