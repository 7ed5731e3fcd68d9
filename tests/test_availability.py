"""
Tests for conflict detection and the in-transaction overlap guard.
"""

import sqlite3
import pytest
from datetime import date, time

from database import get_db
from models.reservation_availability import (
    check_conflict, find_day_conflict, find_first_conflict
)
from models.reservation_crud import insert_reservations, update_reservation_fields
from models.reservation_errors import ConflictError, InfrastructureError
from models.reservation_multiday import expand_reservation_request
from models.reservation_request import ReservationRequest


def _row(resources, activity_date='2025-06-10', start='09:00', end='10:00', **overrides):
    row = {
        'purpose': 'Seminar',
        'activity_date': activity_date,
        'start_time': start,
        'end_time': end,
        'org_id': resources['org_id'],
        'venue_id': resources['gym_id'],
        'equipment_ids': [],
        'reserved_by': 'Juan Dela Cruz',
        'officer_in_charge': 'Maria Santos',
        'contact_no': '+639123456789',
    }
    row.update(overrides)
    return row


def _count_reservations():
    return get_db().execute('SELECT COUNT(*) FROM reservations').fetchone()[0]


class TestCheckConflict:
    """Tests for single-resource conflict checks."""

    def test_back_to_back_is_free(self, app, resources):
        insert_reservations([_row(resources, start='09:00', end='10:00')])

        has_conflict, existing = check_conflict(
            'venue', resources['gym_id'], '2025-06-10', '10:00', '11:00'
        )
        assert has_conflict is False
        assert existing is None

    def test_overlap_reports_reservation_and_org(self, app, resources):
        created = insert_reservations([_row(resources, start='10:00', end='11:00')])

        has_conflict, existing = check_conflict(
            'venue', resources['gym_id'], '2025-06-10', '09:00', '10:30'
        )
        assert has_conflict is True
        assert existing['reservation_id'] == created[0]['reservation_id']
        assert existing['org_id'] == resources['org_id']
        assert existing['org_name'] == 'Junior Philippine Computer Society'

    def test_other_venue_or_date_is_free(self, app, resources):
        insert_reservations([_row(resources)])

        assert check_conflict('venue', resources['avr_id'], '2025-06-10', '09:00', '10:00')[0] is False
        assert check_conflict('venue', resources['gym_id'], '2025-06-11', '09:00', '10:00')[0] is False

    @pytest.mark.parametrize('status_id', [2, 4])
    def test_rejected_and_cancelled_release_the_slot(self, app, resources, status_id):
        created = insert_reservations([_row(resources)])
        update_reservation_fields(
            created[0]['reservation_id'], check_overlaps=False, reservation_status_id=status_id
        )

        assert check_conflict('venue', resources['gym_id'], '2025-06-10', '09:00', '10:00')[0] is False

    def test_reserved_still_blocks(self, app, resources):
        created = insert_reservations([_row(resources)])
        update_reservation_fields(
            created[0]['reservation_id'], check_overlaps=False, reservation_status_id=1
        )

        assert check_conflict('venue', resources['gym_id'], '2025-06-10', '09:30', '09:45')[0] is True

    def test_excluded_reservation_is_ignored(self, app, resources):
        created = insert_reservations([_row(resources)])

        has_conflict, _ = check_conflict(
            'venue', resources['gym_id'], '2025-06-10', '09:00', '10:00',
            exclude_reservation_id=created[0]['reservation_id']
        )
        assert has_conflict is False

    def test_equipment_conflicts_through_links(self, app, resources):
        created = insert_reservations([
            _row(resources, venue_id=None, equipment_ids=[resources['projector_id']])
        ])

        has_conflict, existing = check_conflict(
            'equipment', resources['projector_id'], '2025-06-10', '09:30', '11:00'
        )
        assert has_conflict is True
        assert existing['reservation_id'] == created[0]['reservation_id']
        assert check_conflict(
            'equipment', resources['speaker_id'], '2025-06-10', '09:30', '11:00'
        )[0] is False

    def test_store_failure_is_not_no_conflict(self, app, resources, monkeypatch):
        def locked(*args, **kwargs):
            raise sqlite3.OperationalError('database is locked')

        monkeypatch.setattr('models.reservation_availability.find_overlapping', locked)

        with pytest.raises(InfrastructureError) as exc:
            check_conflict('venue', resources['gym_id'], '2025-06-10', '09:00', '10:00')
        assert exc.value.retryable is True


class TestFindConflicts:
    """Tests for conflicts across daily reservations."""

    def test_venue_checked_before_equipment(self, app, resources):
        insert_reservations([_row(resources, equipment_ids=[resources['projector_id']])])

        conflict = find_day_conflict(
            _row(resources, equipment_ids=[resources['projector_id']])
        )
        assert isinstance(conflict, ConflictError)
        assert conflict.resource_type == 'venue'

    def test_first_conflicting_day_is_reported(self, app, resources):
        existing = insert_reservations([_row(resources, activity_date='2025-06-11')])[0]
        request = ReservationRequest(
            purpose='Week-long Fair', start_date=date(2025, 6, 9), end_date=date(2025, 6, 13),
            start_time=time(9, 0), end_time=time(10, 0), org_id=resources['other_org_id'],
            venue_id=resources['gym_id'], reserved_by='A', officer_in_charge='B',
            contact_no='+639123456789'
        )

        conflict = find_first_conflict(expand_reservation_request(request))

        assert conflict.activity_date == '2025-06-11'
        assert conflict.conflicting_reservation_id == existing['reservation_id']
        assert 'Junior Philippine Computer Society' in conflict.message

    def test_no_conflict(self, app, resources):
        assert find_first_conflict([_row(resources)]) is None


class TestInsertGuard:
    """Tests for the overlap re-check inside the write transaction."""

    def test_overlapping_insert_is_refused(self, app, resources):
        insert_reservations([_row(resources)])

        with pytest.raises(ConflictError):
            insert_reservations([_row(resources, start='09:30', end='10:30')])
        assert _count_reservations() == 1

    def test_batch_is_all_or_nothing(self, app, resources):
        insert_reservations([_row(resources, activity_date='2025-06-11')])

        with pytest.raises(ConflictError):
            insert_reservations([
                _row(resources, activity_date='2025-06-10'),
                _row(resources, activity_date='2025-06-11'),
            ])
        assert _count_reservations() == 1

    def test_update_into_taken_slot_is_refused(self, app, resources):
        insert_reservations([_row(resources, start='09:00', end='10:00')])
        other = insert_reservations([_row(resources, start='11:00', end='12:00')])[0]

        with pytest.raises(ConflictError):
            update_reservation_fields(other['reservation_id'], start_time='09:30', end_time='10:30')

    def test_update_within_own_slot_is_allowed(self, app, resources):
        created = insert_reservations([_row(resources)])[0]

        updated = update_reservation_fields(
            created['reservation_id'], start_time='09:15', end_time='09:45'
        )
        assert updated['start_time'] == '09:15'
