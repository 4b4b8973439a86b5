"""
Tests for the storage guard: deadlines, cancellation and fault mapping.
"""

import time
import uuid
from unittest import mock

import pytest
from django.db import DatabaseError, OperationalError

from apps.core.exceptions import Cancelled, NotFound, StorageUnavailable
from apps.core.models import Sticker
from apps.core.services import catalog_service, sticker_service, vehicle_service
from apps.core.storage import OperationContext, _Interrupter, guarded


class TestOperationContext:

    def test_without_timeout_never_expires(self):
        context = OperationContext.with_timeout(None)
        assert context.remaining() is None
        assert not context.expired

    def test_expires_after_deadline(self):
        context = OperationContext(deadline=time.monotonic() - 1)
        assert context.expired
        assert context.remaining() == 0.0

    def test_cancel_runs_callbacks_once(self):
        context = OperationContext()
        callback = mock.Mock()
        context.add_cancel_callback(callback)

        context.cancel()
        context.cancel()

        assert context.cancelled
        callback.assert_called_once_with()

    def test_removed_callback_is_not_run(self):
        context = OperationContext()
        callback = mock.Mock()
        context.add_cancel_callback(callback)
        context.remove_cancel_callback(callback)

        context.cancel()

        callback.assert_not_called()


@pytest.mark.django_db
class TestGuard:

    def test_cancelled_before_start(self, sticker):
        context = OperationContext()
        context.cancel()

        with pytest.raises(Cancelled):
            sticker_service.deactivate_sticker(sticker.id, context=context)

        assert Sticker.all_objects.get(pk=sticker.id).is_active

    def test_deadline_already_passed(self):
        context = OperationContext(deadline=time.monotonic() - 1)

        with pytest.raises(StorageUnavailable, match="deadline exceeded"):
            catalog_service.list_body_types(context=context)

    def test_generous_deadline_lets_work_through(self, sticker):
        context = OperationContext.with_timeout(30)

        result = sticker_service.deactivate_sticker(sticker.id, context=context)

        assert result.is_active is False

    def test_domain_errors_pass_through(self):
        with pytest.raises(NotFound):
            vehicle_service.deactivate_vehicle(uuid.uuid4(), context=OperationContext.with_timeout(30))

    def test_database_fault_is_storage_unavailable(self):
        with mock.patch('apps.core.services.catalog_service._listing', side_effect=OperationalError("gone")):
            with pytest.raises(StorageUnavailable, match="storage unavailable"):
                catalog_service.list_body_types()

    def test_fault_after_cancel_is_cancelled(self):
        context = OperationContext()
        with mock.patch.object(_Interrupter, 'fire'), pytest.raises(Cancelled):
            with guarded('lookup', context=context):
                context.cancel()
                raise DatabaseError("interrupted")

    def test_fault_after_deadline_is_storage_unavailable(self):
        context = OperationContext(deadline=time.monotonic() + 0.01)
        with mock.patch.object(_Interrupter, 'fire'), pytest.raises(StorageUnavailable, match="timed out"):
            with guarded('lookup', context=context):
                time.sleep(0.05)
                raise DatabaseError("interrupted")

    def test_cancel_interrupts_the_connection(self):
        context = OperationContext()
        with mock.patch.object(_Interrupter, 'fire') as fire:
            with guarded('lookup', context=context):
                context.cancel()
        fire.assert_called_once_with()

    def test_callback_is_released_after_the_block(self):
        context = OperationContext()
        with guarded('lookup', context=context):
            pass
        assert context._callbacks == []


class TestInterrupter:

    def test_fire_uses_the_backend_abort(self):
        interrupter = _Interrupter('default')
        raw = mock.Mock(spec=['interrupt'])
        with mock.patch.object(interrupter.connection, 'connection', raw):
            interrupter.fire()
            interrupter.fire()
        raw.interrupt.assert_called_once_with()

    def test_no_fire_after_finish(self):
        interrupter = _Interrupter('default')
        raw = mock.Mock(spec=['cancel'])
        interrupter.finish()
        with mock.patch.object(interrupter.connection, 'connection', raw):
            interrupter.fire()
        raw.cancel.assert_not_called()
