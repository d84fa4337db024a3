"""
Unit tests for MemberUseCase and OrganizationCommandUseCase

Test Focus:
1. Only admins add members and change roles; anyone may leave
2. The last admin can neither leave nor be demoted
3. Feature permissions are dropped unless a super user sets them
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.service.organization.app.command.member_use_case import MemberUseCase
from src.service.organization.app.command.organization_command_use_case import (
    OrganizationCommandUseCase,
)
from src.service.organization.domain.organization_entity import (
    MemberEntity,
    OrganizationEntity,
    OrganizationUpdate,
)
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def admin(organization_id) -> MemberEntity:
    return MemberEntity(user_id=uuid4(), organization_id=organization_id, role=Role.ADMIN)


@pytest.fixture
def mock_member_repo(admin: MemberEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = admin
    repo.get_by_user_and_organization.return_value = None
    repo.find_many.return_value = [admin]
    repo.create.side_effect = lambda *, member: member
    repo.delete.return_value = admin
    return repo


@pytest.fixture
def mock_permission_service() -> AsyncMock:
    service = AsyncMock()
    service.has_role.return_value = True
    service.is_super_user.return_value = False
    return service


@pytest.fixture
def member_use_case(mock_member_repo, mock_permission_service) -> MemberUseCase:
    return MemberUseCase(member_repo=mock_member_repo, permission_service=mock_permission_service)


@pytest.mark.unit
class TestMembers:
    @pytest.mark.asyncio
    async def test_add_member_success(self, member_use_case: MemberUseCase, organization_id):
        new_user_id = uuid4()

        member = await member_use_case.add_member(
            user_id=uuid4(),
            organization_id=organization_id,
            member_user_id=new_user_id,
            role=Role.MEMBER,
        )

        assert member.user_id == new_user_id
        assert member.role == Role.MEMBER

    @pytest.mark.asyncio
    async def test_add_member_fail__already_member(
        self, member_use_case: MemberUseCase, organization_id, admin, mock_member_repo
    ):
        mock_member_repo.get_by_user_and_organization.return_value = admin

        with pytest.raises(InvalidArgumentError, match='already a member'):
            await member_use_case.add_member(
                user_id=uuid4(),
                organization_id=organization_id,
                member_user_id=admin.user_id,
                role=Role.MEMBER,
            )

    @pytest.mark.asyncio
    async def test_add_member_fail__not_admin(
        self, member_use_case: MemberUseCase, organization_id, mock_permission_service
    ):
        mock_permission_service.has_role.return_value = False

        with pytest.raises(PermissionDeniedError):
            await member_use_case.add_member(
                user_id=uuid4(),
                organization_id=organization_id,
                member_user_id=uuid4(),
                role=Role.MEMBER,
            )

    @pytest.mark.asyncio
    async def test_leave__only_requires_membership(
        self,
        member_use_case: MemberUseCase,
        organization_id,
        mock_member_repo,
        mock_permission_service,
    ):
        """
        Given: a regular member
        When: they remove their own membership
        Then: the check asks for MEMBER, not ADMIN
        """
        # Arrange
        member = MemberEntity(user_id=uuid4(), organization_id=organization_id)
        mock_member_repo.get_by_id.return_value = member
        mock_member_repo.delete.return_value = member

        # Act
        await member_use_case.remove_member(user_id=member.user_id, member_id=member.id)

        # Assert
        assert mock_permission_service.has_role.await_args.kwargs['role'] == Role.MEMBER
        mock_member_repo.delete.assert_awaited_once_with(member_id=member.id)

    @pytest.mark.asyncio
    async def test_remove_fail__last_admin(
        self, member_use_case: MemberUseCase, admin: MemberEntity, mock_member_repo
    ):
        with pytest.raises(InvalidArgumentError, match='last admin'):
            await member_use_case.remove_member(user_id=admin.user_id, member_id=admin.id)
        mock_member_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_demote_fail__last_admin(self, member_use_case: MemberUseCase, admin):
        with pytest.raises(InvalidArgumentError, match='last admin'):
            await member_use_case.update_role(
                user_id=admin.user_id, member_id=admin.id, role=Role.MEMBER
            )

    @pytest.mark.asyncio
    async def test_demote_success__another_admin_exists(
        self, member_use_case: MemberUseCase, admin, organization_id, mock_member_repo
    ):
        other_admin = MemberEntity(
            user_id=uuid4(), organization_id=organization_id, role=Role.ADMIN
        )
        mock_member_repo.find_many.return_value = [admin, other_admin]

        await member_use_case.update_role(
            user_id=other_admin.user_id, member_id=admin.id, role=Role.MEMBER
        )

        mock_member_repo.update_role.assert_awaited_once_with(member_id=admin.id, role=Role.MEMBER)

    @pytest.mark.asyncio
    async def test_find_many_fail__anonymous(self, member_use_case: MemberUseCase, organization_id):
        with pytest.raises(UnauthorizedError):
            await member_use_case.find_many(user_id=None, organization_id=organization_id)


@pytest.mark.unit
class TestOrganizationCommands:
    @pytest.fixture
    def mock_organization_repo(self) -> AsyncMock:
        repo = AsyncMock()
        repo.create.side_effect = lambda *, organization, admin_user_id: organization
        repo.update.side_effect = lambda *, organization: organization
        return repo

    @pytest.fixture
    def use_case(self, mock_organization_repo, mock_permission_service):
        return OrganizationCommandUseCase(
            organization_repo=mock_organization_repo, permission_service=mock_permission_service
        )

    @pytest.mark.asyncio
    async def test_create__creator_becomes_admin(
        self, use_case: OrganizationCommandUseCase, mock_organization_repo
    ):
        user_id = uuid4()

        organization = await use_case.create(
            user_id=user_id,
            name='Janus',
            feature_permissions=[FeaturePermission.ARCHIVE_WRITE_DOCUMENTS],
        )

        assert organization.name == 'Janus'
        assert organization.feature_permissions == []
        assert mock_organization_repo.create.await_args.kwargs['admin_user_id'] == user_id

    @pytest.mark.asyncio
    async def test_create__super_user_grants_feature_permissions(
        self, use_case: OrganizationCommandUseCase, mock_permission_service
    ):
        mock_permission_service.is_super_user.return_value = True

        organization = await use_case.create(
            user_id=uuid4(),
            name='Janus',
            feature_permissions=[FeaturePermission.ARCHIVE_WRITE_DOCUMENTS],
        )

        assert organization.feature_permissions == [FeaturePermission.ARCHIVE_WRITE_DOCUMENTS]

    @pytest.mark.asyncio
    async def test_create_fail__name_too_long(self, use_case: OrganizationCommandUseCase):
        with pytest.raises(InvalidArgumentError):
            await use_case.create(user_id=uuid4(), name='x' * 101)

    @pytest.mark.asyncio
    async def test_update__member_cannot_change_feature_permissions(
        self, use_case: OrganizationCommandUseCase, mock_organization_repo
    ):
        organization = OrganizationEntity.create(name='Janus')
        mock_organization_repo.get_by_id.return_value = organization

        updated = await use_case.update(
            user_id=uuid4(),
            organization_id=organization.id,
            data=OrganizationUpdate(
                description='Linjeforeningen',
                feature_permissions=[FeaturePermission.CABIN_ADMIN],
            ),
        )

        assert updated.description == 'Linjeforeningen'
        assert updated.feature_permissions == []

    @pytest.mark.asyncio
    async def test_update_fail__not_member(
        self, use_case: OrganizationCommandUseCase, mock_permission_service
    ):
        mock_permission_service.has_role.return_value = False

        with pytest.raises(PermissionDeniedError):
            await use_case.update(
                user_id=uuid4(), organization_id=uuid4(), data=OrganizationUpdate(name='Nytt')
            )
