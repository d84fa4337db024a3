"""
Unit tests for PermissionService

Test Focus:
1. Super users pass every check
2. ADMIN satisfies any role; MEMBER only MEMBER
3. Feature permissions through organizations and confirmed study programs
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.service.organization.app.query.permission_service import PermissionService
from src.service.organization.domain.organization_entity import MemberEntity, OrganizationEntity
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role
from src.service.user.domain.user_entity import StudyProgramEntity, UserEntity


@pytest.fixture
def user() -> UserEntity:
    return UserEntity.create(
        feide_id='feide-1',
        email='ola@indokntnu.no',
        first_name='Ola',
        last_name='Nordmann',
        username='olanor',
    )


@pytest.fixture
def organization() -> OrganizationEntity:
    return OrganizationEntity.create(
        name='Hyttestyret', feature_permissions=[FeaturePermission.CABIN_ADMIN]
    )


@pytest.fixture
def mock_member_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_user_and_organization.return_value = None
    return repo


@pytest.fixture
def mock_organization_repo(organization: OrganizationEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = organization
    repo.find_many.return_value = []
    return repo


@pytest.fixture
def mock_user_query_repo(user: UserEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = user
    repo.get_study_program.return_value = None
    return repo


@pytest.fixture
def service(mock_member_repo, mock_organization_repo, mock_user_query_repo) -> PermissionService:
    return PermissionService(
        member_repo=mock_member_repo,
        organization_repo=mock_organization_repo,
        user_query_repo=mock_user_query_repo,
    )


@pytest.mark.unit
class TestHasRole:
    @pytest.mark.asyncio
    async def test_anonymous_has_no_role(self, service: PermissionService, organization):
        assert not await service.has_role(
            user_id=None, organization_id=organization.id, role=Role.MEMBER
        )

    @pytest.mark.asyncio
    async def test_super_user_passes_without_membership(
        self, service: PermissionService, user: UserEntity, organization, mock_member_repo
    ):
        user.is_super_user = True

        assert await service.has_role(
            user_id=user.id, organization_id=organization.id, role=Role.ADMIN
        )
        mock_member_repo.get_by_user_and_organization.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_member_has_no_role(self, service: PermissionService, user, organization):
        assert not await service.has_role(
            user_id=user.id, organization_id=organization.id, role=Role.MEMBER
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'member_role,required_role,expected',
        [
            (Role.ADMIN, Role.MEMBER, True),
            (Role.ADMIN, Role.ADMIN, True),
            (Role.MEMBER, Role.MEMBER, True),
            (Role.MEMBER, Role.ADMIN, False),
        ],
    )
    async def test_role_hierarchy(
        self,
        service: PermissionService,
        user: UserEntity,
        organization: OrganizationEntity,
        mock_member_repo,
        member_role,
        required_role,
        expected,
    ):
        mock_member_repo.get_by_user_and_organization.return_value = MemberEntity(
            user_id=user.id, organization_id=organization.id, role=member_role
        )

        result = await service.has_role(
            user_id=user.id, organization_id=organization.id, role=required_role
        )

        assert result is expected

    @pytest.mark.asyncio
    async def test_role_with_feature_permission_requires_organization_permission(
        self, service: PermissionService, user, organization, mock_member_repo
    ):
        mock_member_repo.get_by_user_and_organization.return_value = MemberEntity(
            user_id=user.id, organization_id=organization.id
        )

        assert await service.has_role(
            user_id=user.id,
            organization_id=organization.id,
            role=Role.MEMBER,
            feature_permission=FeaturePermission.CABIN_ADMIN,
        )
        assert not await service.has_role(
            user_id=user.id,
            organization_id=organization.id,
            role=Role.MEMBER,
            feature_permission=FeaturePermission.ARCHIVE_WRITE_DOCUMENTS,
        )


@pytest.mark.unit
class TestHasFeaturePermission:
    @pytest.mark.asyncio
    async def test_through_organization(
        self, service: PermissionService, user, organization, mock_organization_repo
    ):
        mock_organization_repo.find_many.return_value = [organization]

        assert await service.has_feature_permission(
            user_id=user.id, feature_permission=FeaturePermission.CABIN_ADMIN
        )

    @pytest.mark.asyncio
    async def test_through_confirmed_study_program(
        self, service: PermissionService, user: UserEntity, mock_user_query_repo
    ):
        # Given: a user whose confirmed study program grants archive access
        program = StudyProgramEntity(
            name='Indøk',
            external_id='MIIØ',
            feature_permissions=[FeaturePermission.ARCHIVE_VIEW_DOCUMENTS],
        )
        user.confirmed_study_program_id = program.id
        mock_user_query_repo.get_study_program.return_value = program

        # Then
        assert await service.has_feature_permission(
            user_id=user.id, feature_permission=FeaturePermission.ARCHIVE_VIEW_DOCUMENTS
        )

    @pytest.mark.asyncio
    async def test_unconfirmed_study_program_grants_nothing(
        self, service: PermissionService, user: UserEntity, mock_user_query_repo
    ):
        user.study_program_id = uuid4()

        assert not await service.has_feature_permission(
            user_id=user.id, feature_permission=FeaturePermission.ARCHIVE_VIEW_DOCUMENTS
        )
        mock_user_query_repo.get_study_program.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user_has_nothing(self, service: PermissionService, mock_user_query_repo):
        mock_user_query_repo.get_by_id.return_value = None

        assert not await service.has_feature_permission(
            user_id=uuid4(), feature_permission=FeaturePermission.CABIN_ADMIN
        )
