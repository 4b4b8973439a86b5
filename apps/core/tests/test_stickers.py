"""
Tests for the sticker lifecycle.

Validates:
- Issuance rules
- Active listing
- Deactivation is terminal, single-write and leaves the status alone
- Re-deactivating an inactive sticker is an idempotent no-op returning the
  stored record (chosen behaviour; the alternative would be an error)
"""

import uuid
from datetime import timedelta
from unittest import mock

import pytest
from django.utils import timezone

from apps.core.exceptions import NotFound, ValidationViolation
from apps.core.models import Owner, Sticker, StickerStatus
from apps.core.services import sticker_service
from tests.factories import (
    CustomerFactory,
    PolicyFactory,
    StickerFactory,
    StickerStockFactory,
    VehicleFactory,
)


@pytest.mark.django_db
class TestIssueSticker:

    def test_issue(self, policy, user):
        stock = StickerStockFactory()

        sticker = sticker_service.issue_sticker(
            created_by=user, policy_id=policy.id, sticker_no=" S-0001 ", stock_id=stock.id,
        )

        assert sticker.sticker_no == "S-0001"
        assert sticker.status == StickerStatus.ISSUED
        assert sticker.is_active
        assert sticker.stock == stock
        assert sticker.created_at == sticker.updated_at

    def test_number_and_policy_required(self, policy):
        with pytest.raises(ValidationViolation, match="Sticker number and policy are required"):
            sticker_service.issue_sticker(policy_id=policy.id, sticker_no="  ")
        with pytest.raises(ValidationViolation, match="Sticker number and policy are required"):
            sticker_service.issue_sticker(policy_id=None, sticker_no="S-0002")

    def test_number_unique_even_after_deactivation(self, sticker, policy):
        sticker_service.deactivate_sticker(sticker.id)

        with pytest.raises(ValidationViolation, match="Sticker number already exists"):
            sticker_service.issue_sticker(policy_id=policy.id, sticker_no=sticker.sticker_no)

    def test_duplicate_number_rejected_by_the_database(self, sticker, policy):
        # Another writer inserted the same number after the existence check
        with mock.patch('django.db.models.query.QuerySet.exists', return_value=False):
            with pytest.raises(ValidationViolation, match="conflicts with an existing record"):
                sticker_service.issue_sticker(policy_id=policy.id, sticker_no=sticker.sticker_no)

        assert Sticker.all_objects.filter(sticker_no=sticker.sticker_no).count() == 1

    def test_unknown_policy(self):
        with pytest.raises(NotFound, match="Policy not found"):
            sticker_service.issue_sticker(policy_id=uuid.uuid4(), sticker_no="S-0003")

    def test_inactive_policy_rejected(self, policy):
        policy.soft_delete()

        with pytest.raises(ValidationViolation, match="Policy is inactive") as excinfo:
            sticker_service.issue_sticker(policy_id=policy.id, sticker_no="S-0004")
        assert excinfo.value.message_dict == {'policy': ["Policy is inactive"]}
        assert not Sticker.all_objects.filter(sticker_no="S-0004").exists()

    def test_inactive_stock_rejected(self, policy):
        stock = StickerStockFactory(is_active=False)

        with pytest.raises(ValidationViolation) as excinfo:
            sticker_service.issue_sticker(policy_id=policy.id, sticker_no="S-0005", stock_id=stock.id)
        assert 'stock' in excinfo.value.message_dict
        assert not Sticker.all_objects.filter(sticker_no="S-0005").exists()


@pytest.mark.django_db
class TestListActiveStickers:

    def test_newest_first_and_inactive_excluded(self, policy):
        older = StickerFactory(policy=policy)
        newer = StickerFactory(policy=policy)
        gone = StickerFactory(policy=policy)
        sticker_service.deactivate_sticker(gone.id)
        Sticker.all_objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(hours=1))

        stickers = sticker_service.list_active_stickers()

        assert [s.pk for s in stickers] == [newer.pk, older.pk]

    def test_party_and_vehicle_are_joined(self):
        owner = CustomerFactory()
        policy = PolicyFactory(vehicle=VehicleFactory(customer=owner))
        StickerFactory(policy=policy)

        [sticker] = sticker_service.list_active_stickers()

        assert sticker.policy.owner == Owner.customer(owner.id)
        assert sticker.policy.vehicle.registration_no == policy.vehicle.registration_no

    def test_filter_by_status_and_policy(self, policy):
        voided = StickerFactory(policy=policy, status=StickerStatus.VOIDED)
        StickerFactory(policy=policy)
        other = StickerFactory()

        assert [s.pk for s in sticker_service.list_active_stickers(status=StickerStatus.VOIDED)] == [voided.pk]
        assert [s.pk for s in sticker_service.list_active_stickers(policy_id=other.policy_id)] == [other.pk]

    def test_malformed_policy_filter(self):
        with pytest.raises(ValidationViolation):
            sticker_service.list_active_stickers(policy_id="not-a-uuid")

    def test_empty(self):
        assert sticker_service.list_active_stickers() == []


@pytest.mark.django_db
class TestDeactivateSticker:

    def test_deactivate_active_sticker(self, sticker, user):
        created_at = sticker.created_at
        previous_update = sticker.updated_at

        result = sticker_service.deactivate_sticker(sticker.id, actor=user)

        assert result.id == sticker.id
        assert result.is_active is False
        assert result.deleted_at is not None
        assert result.updated_at == result.deleted_at
        assert result.updated_at > previous_update
        assert result.created_at == created_at
        assert result.updated_by == user

        stored = Sticker.all_objects.get(pk=sticker.id)
        assert stored.is_active is False
        assert stored.deleted_at == result.deleted_at

    def test_status_is_untouched(self, policy):
        sticker = StickerFactory(policy=policy, status=StickerStatus.EXPIRED)

        result = sticker_service.deactivate_sticker(sticker.id)

        assert result.status == StickerStatus.EXPIRED
        assert Sticker.all_objects.get(pk=sticker.id).status == StickerStatus.EXPIRED

    def test_second_call_returns_the_stored_record(self, sticker):
        first = sticker_service.deactivate_sticker(sticker.id)
        second = sticker_service.deactivate_sticker(sticker.id)

        assert second.is_active is False
        assert second.deleted_at == first.deleted_at
        assert second.updated_at == first.updated_at

    def test_second_call_does_not_write(self, sticker):
        sticker_service.deactivate_sticker(sticker.id)

        with mock.patch.object(Sticker, 'save') as save:
            sticker_service.deactivate_sticker(sticker.id)
        save.assert_not_called()

    def test_unknown_sticker(self, sticker):
        before = Sticker.all_objects.get(pk=sticker.id).updated_at

        with pytest.raises(NotFound, match="Sticker not found"):
            sticker_service.deactivate_sticker(uuid.uuid4())

        assert Sticker.all_objects.get(pk=sticker.id).updated_at == before
        assert Sticker.objects.active().count() == 1

    def test_malformed_id_is_not_found(self):
        with pytest.raises(NotFound, match="Sticker not found"):
            sticker_service.deactivate_sticker("S1")

    def test_unknown_sticker_does_not_write(self):
        with mock.patch.object(Sticker, 'save') as save:
            with pytest.raises(NotFound):
                sticker_service.deactivate_sticker(uuid.uuid4())
        save.assert_not_called()
