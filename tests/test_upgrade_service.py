# tests/test_upgrade_service.py

from decimal import Decimal

import pytest

from reward_tiers.errors import MigrationPrecondition, NotFound, ValidationError
from reward_tiers.models.customer import Customer
from reward_tiers.models.data_version import DataVersion
from reward_tiers.services import upgrade_service
from reward_tiers.services.data_version_service import get_data_version
from reward_tiers.services.reward_repository import get_reward, list_rewards, reward_exists
from reward_tiers.services.upgrade_service import (
    CURRENT_DATA_VERSION,
    UP_TO_DATE,
    NeedsUpgrade,
    activate_brand,
    on_version_change,
    resolve_upgrade_state,
)

from tests.conftest import BRAND, OTHER_BRAND, add_customer, add_reward


class TestResolveUpgradeState:
    def test_older_marker_needs_upgrade(self):
        assert resolve_upgrade_state(1, 2) == NeedsUpgrade(from_version=1)

    def test_equal_marker_is_up_to_date(self):
        assert resolve_upgrade_state(2, 2) is UP_TO_DATE

    def test_newer_marker_is_refused(self):
        with pytest.raises(MigrationPrecondition):
            resolve_upgrade_state(3, 2)


class TestUpgradeToVersion2:
    def test_valid_store_is_upgraded(self, v1_catalog):
        db = v1_catalog

        applied = on_version_change(db, BRAND, 1, 2)

        assert applied == [2]
        assert not reward_exists(db, BRAND, "BRONZE")
        aluminum = get_reward(db, BRAND, "ALUMINUM")
        assert aluminum.description == "Aluminum Level"
        assert aluminum.discount_percentage == Decimal("5.00")
        assert aluminum.minimum_purchase == Decimal("25.00")
        platinum = get_reward(db, BRAND, "PLATINUM")
        assert platinum.description == "Platinum level"
        assert platinum.discount_percentage == Decimal("50.00")
        assert get_data_version(db, BRAND) == 2

    def test_customers_follow_the_renamed_tier(self, v1_catalog):
        add_customer(v1_catalog, "c-1", reward_code="BRONZE")
        add_customer(v1_catalog, "c-2", reward_code="GOLD")

        on_version_change(v1_catalog, BRAND, 1, 2)
        v1_catalog.expire_all()

        codes = {c.profile_id: c.reward_code for c in v1_catalog.query(Customer).all()}
        assert codes == {"c-1": "ALUMINUM", "c-2": "GOLD"}

    def test_store_without_bronze_fails_and_keeps_marker(self, db_session):
        add_reward(db_session, "GOLD", "Gold Level", 20)
        db_session.add(DataVersion(brand=BRAND, version=1))
        db_session.commit()

        with pytest.raises(MigrationPrecondition):
            on_version_change(db_session, BRAND, 1, 2)

        assert get_data_version(db_session, BRAND) == 1
        assert [r.code for r in list_rewards(db_session, BRAND)] == ["GOLD"]

    def test_store_with_bronze_and_aluminum_fails(self, v1_catalog):
        add_reward(v1_catalog, "ALUMINUM", "Aluminum", 3)

        with pytest.raises(MigrationPrecondition):
            on_version_change(v1_catalog, BRAND, 1, 2)

        assert get_data_version(v1_catalog, BRAND) == 1
        assert get_reward(v1_catalog, BRAND, "BRONZE").description == "Bronze Level"

    def test_failed_insert_rolls_back_the_rename(self, v1_catalog, monkeypatch):
        def broken_seed(*args, **kwargs):
            raise ValidationError("simulated failure")

        monkeypatch.setattr(upgrade_service, "seed_reward", broken_seed)

        with pytest.raises(ValidationError):
            on_version_change(v1_catalog, BRAND, 1, 2)

        assert reward_exists(v1_catalog, BRAND, "BRONZE")
        assert not reward_exists(v1_catalog, BRAND, "ALUMINUM")
        assert get_data_version(v1_catalog, BRAND) == 1

    def test_rerun_after_rename_without_marker_completes(self, db_session):
        add_reward(db_session, "GOLD", "Gold Level", 20)
        add_reward(db_session, "SILVER", "Silver Level", 10)
        add_reward(db_session, "ALUMINUM", "Bronze Level", 5)
        db_session.add(DataVersion(brand=BRAND, version=1))
        db_session.commit()

        assert on_version_change(db_session, BRAND, 1, 2) == [2]

        assert get_reward(db_session, BRAND, "ALUMINUM").description == "Aluminum Level"
        assert get_reward(db_session, BRAND, "PLATINUM").discount_percentage == Decimal("50.00")
        assert get_data_version(db_session, BRAND) == 2

    def test_existing_platinum_is_not_inserted_twice(self, v1_catalog):
        add_reward(v1_catalog, "PLATINUM", "Platinum level", 50)

        on_version_change(v1_catalog, BRAND, 1, 2)

        assert [r.code for r in list_rewards(v1_catalog, BRAND)] == ["ALUMINUM", "GOLD", "PLATINUM", "SILVER"]

    def test_up_to_date_store_is_not_touched(self, v1_catalog):
        assert on_version_change(v1_catalog, BRAND, 2, 2) == []
        assert reward_exists(v1_catalog, BRAND, "BRONZE")

    def test_other_brands_are_not_upgraded(self, v1_catalog):
        add_reward(v1_catalog, "BRONZE", "Bronze Level", 5, brand=OTHER_BRAND)

        on_version_change(v1_catalog, BRAND, 1, 2)

        assert reward_exists(v1_catalog, OTHER_BRAND, "BRONZE")
        with pytest.raises(NotFound):
            get_reward(v1_catalog, OTHER_BRAND, "ALUMINUM")
        assert get_data_version(v1_catalog, OTHER_BRAND) == 1


class TestActivateBrand:
    def test_fresh_brand_ends_on_current_catalog(self, db_session):
        applied = activate_brand(db_session, BRAND)

        assert applied == [2]
        assert {r.code: r.discount_percentage for r in list_rewards(db_session, BRAND)} == {
            "ALUMINUM": Decimal("5.00"),
            "GOLD": Decimal("20.00"),
            "PLATINUM": Decimal("50.00"),
            "SILVER": Decimal("10.00"),
        }
        assert get_data_version(db_session, BRAND) == CURRENT_DATA_VERSION

    def test_second_activation_changes_nothing(self, db_session):
        activate_brand(db_session, BRAND)

        assert activate_brand(db_session, BRAND) == []
        assert len(list_rewards(db_session, BRAND)) == 4
