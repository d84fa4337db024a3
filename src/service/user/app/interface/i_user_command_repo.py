from abc import ABC, abstractmethod

from src.service.user.domain.user_entity import UserEntity


class IUserCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, user: UserEntity) -> UserEntity:
        pass

    @abstractmethod
    async def update(self, *, user: UserEntity) -> UserEntity:
        pass
