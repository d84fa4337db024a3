from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.user.domain.user_entity import StudyProgramEntity, UserEntity


class IUserQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, user_id: UUID) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def get_by_feide_id(self, *, feide_id: str) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def find_many(self) -> list[UserEntity]:
        pass

    @abstractmethod
    async def get_study_program(self, *, study_program_id: UUID) -> Optional[StudyProgramEntity]:
        pass

    @abstractmethod
    async def find_many_study_programs(self) -> list[StudyProgramEntity]:
        pass
