"""
Unit tests for UserEntity

Test Focus:
1. grade_year follows the academic year (starting in August)
2. Graduation year can be set freely on first login, then once a year
3. Profile validation
4. Username selection from Feide ids
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import InvalidArgumentError, PermissionDeniedError
from src.service.user.domain.user_entity import (
    SuperUserUpdate,
    UserEntity,
    UserUpdate,
    username_from_feide_ids,
)


SEPTEMBER_2026 = datetime(2026, 9, 1, tzinfo=timezone.utc)
MARCH_2026 = datetime(2026, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def user() -> UserEntity:
    return UserEntity.create(
        feide_id='feide-123',
        email='ola.nordmann@indokntnu.no',
        first_name='Ola',
        last_name='Nordmann',
        username='olanor',
    )


@pytest.mark.unit
class TestGradeYear:
    @pytest.mark.parametrize(
        'graduation_year,now,expected',
        [
            (2027, SEPTEMBER_2026, 5),
            (2027, MARCH_2026, 4),
            (2031, SEPTEMBER_2026, 1),
            (2040, SEPTEMBER_2026, 1),
            (2020, SEPTEMBER_2026, 5),
        ],
    )
    def test_grade_year(self, user: UserEntity, graduation_year, now, expected):
        user.graduation_year = graduation_year

        assert user.grade_year(now) == expected

    def test_no_graduation_year_means_no_grade(self, user: UserEntity):
        assert user.grade_year(SEPTEMBER_2026) is None


@pytest.mark.unit
class TestApplyUpdate:
    def test_first_login_sets_graduation_year_and_clears_flag(self, user: UserEntity):
        # Given: a fresh user
        assert user.first_login

        # When
        user.apply_update(UserUpdate(graduation_year=2028), now=SEPTEMBER_2026)

        # Then: the yearly lock has not started
        assert user.graduation_year == 2028
        assert user.graduation_year_updated_at is None
        assert not user.first_login

    def test_year_can_be_corrected_right_after_first_login(self, user: UserEntity):
        # Given: the year was picked on first login
        user.apply_update(UserUpdate(graduation_year=2030), now=SEPTEMBER_2026)

        # When
        user.apply_update(UserUpdate(graduation_year=2029), now=SEPTEMBER_2026)

        # Then: the correction starts the lock
        assert user.graduation_year == 2029
        assert user.graduation_year_updated_at == SEPTEMBER_2026
        assert not user.can_update_year(SEPTEMBER_2026)

    def test_graduation_year_is_locked_for_a_year(self, user: UserEntity):
        # Given: the year was changed a month ago
        user.first_login = False
        user.graduation_year = 2028
        user.graduation_year_updated_at = SEPTEMBER_2026 - timedelta(days=30)

        # When
        user.apply_update(UserUpdate(graduation_year=2029), now=SEPTEMBER_2026)

        # Then: unchanged
        assert user.graduation_year == 2028

    def test_graduation_year_can_change_after_a_year(self, user: UserEntity):
        user.first_login = False
        user.graduation_year = 2028
        user.graduation_year_updated_at = SEPTEMBER_2026 - timedelta(days=400)

        user.apply_update(UserUpdate(graduation_year=2029), now=SEPTEMBER_2026)

        assert user.graduation_year == 2029
        assert user.graduation_year_updated_at == SEPTEMBER_2026

    @pytest.mark.parametrize(
        'update',
        [
            UserUpdate(first_name='O'),
            UserUpdate(last_name='N'),
            UserUpdate(graduation_year=2020),
            UserUpdate(phone_number='12345678'),
        ],
    )
    def test_invalid_update_is_rejected(self, user: UserEntity, update: UserUpdate):
        with pytest.raises(InvalidArgumentError):
            user.apply_update(update, now=SEPTEMBER_2026)

    def test_valid_phone_number_is_accepted(self, user: UserEntity):
        user.apply_update(UserUpdate(phone_number='+4791234567'), now=SEPTEMBER_2026)

        assert user.phone_number == '+4791234567'

    def test_super_update_ignores_the_year_lock(self, user: UserEntity):
        user.first_login = False
        user.graduation_year = 2028
        user.graduation_year_updated_at = SEPTEMBER_2026

        user.apply_super_update(
            SuperUserUpdate(graduation_year=2030, is_super_user=True), now=SEPTEMBER_2026
        )

        assert user.graduation_year == 2030
        assert user.is_super_user


@pytest.mark.unit
class TestSuperUserAndUsername:
    def test_validate_super_user_rejects_regular_users(self, user: UserEntity):
        with pytest.raises(PermissionDeniedError):
            UserEntity.validate_super_user(user)

    def test_validate_super_user_rejects_anonymous(self):
        with pytest.raises(PermissionDeniedError):
            UserEntity.validate_super_user(None)

    def test_ntnu_id_is_preferred(self):
        ids = ['feide:ola@uio.no', 'feide:olanor@ntnu.no', 'nin:12345678901']

        assert username_from_feide_ids(ids) == 'olanor'

    def test_first_feide_id_is_used_otherwise(self):
        assert username_from_feide_ids(['feide:ola@uio.no']) == 'ola'

    def test_missing_feide_id_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            username_from_feide_ids(['nin:12345678901'])

    def test_create_requires_feide_id(self):
        with pytest.raises(InvalidArgumentError):
            UserEntity.create(
                feide_id='', email='ola@indokntnu.no', first_name='', last_name='', username=''
            )
