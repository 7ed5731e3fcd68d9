"""
Tests for venue, organization and equipment lookups, updates and venue removal.
"""

import pytest

from models.equipment import (
    get_all_equipment, get_equipment_by_id, get_missing_equipment_ids, update_equipment
)
from models.organization import get_all_organizations, get_organization_by_id, update_organization
from models.reservation_crud import insert_reservations, update_reservation_fields
from models.reservation_events import subscribe
from models.reservation_queries import get_reservation_by_id, get_reservation_with_details
from models.reservation_state import (
    STATUS_RESERVED, STATUS_REJECTED, STATUS_PENDING, STATUS_CANCELLED
)
from models.venue import get_all_venues, get_venue_by_id, update_venue, remove_venue


def _book(resources, venue_id, start, end, status_id=None):
    created = insert_reservations([{
        'purpose': 'Seminar',
        'activity_date': '2025-06-10',
        'start_time': start,
        'end_time': end,
        'org_id': resources['org_id'],
        'venue_id': venue_id,
        'equipment_ids': [],
        'reserved_by': 'Juan Dela Cruz',
        'officer_in_charge': 'Maria Santos',
        'contact_no': '+639123456789',
    }])[0]
    if status_id is not None:
        update_reservation_fields(
            created['reservation_id'], check_overlaps=False,
            reservation_status_id=status_id, decision_ts='2025-06-06T10:00:00+08:00'
        )
    return created['reservation_id']


class TestLookups:
    """Tests for reference lookups."""

    def test_venues(self, app, resources):
        names = [v['venue_name'] for v in get_all_venues()]
        assert names == ['Audio-Visual Room', 'Gymnasium']
        assert get_venue_by_id(resources['gym_id'])['capacity'] == 500
        assert get_venue_by_id(999) is None

    def test_organizations(self, app, resources):
        codes = {o['org_code'] for o in get_all_organizations()}
        assert {'CSAO', 'JPCS', 'SC'} <= codes
        assert get_organization_by_id(resources['org_id'])['org_name'] == 'Junior Philippine Computer Society'
        assert get_organization_by_id(999) is None

    def test_equipment(self, app, resources):
        assert len(get_all_equipment()) == 2
        assert [e['equipment_name'] for e in get_all_equipment()] == ['Projector', 'Sound System']
        assert get_missing_equipment_ids([resources['projector_id'], 999]) == [999]
        assert get_missing_equipment_ids([]) == []


class TestUpdates:
    """Tests for the resource update functions."""

    def test_update_venue(self, app, resources):
        assert update_venue(resources['gym_id'], venue_name='Main Gym', capacity=600) is True

        venue = get_venue_by_id(resources['gym_id'])
        assert venue['venue_name'] == 'Main Gym'
        assert venue['capacity'] == 600

    def test_inactive_venue_leaves_the_active_list(self, app, resources):
        update_venue(resources['avr_id'], active=0)

        assert [v['venue_name'] for v in get_all_venues()] == ['Gymnasium']
        assert len(get_all_venues(active_only=False)) == 2

    def test_unknown_fields_are_ignored(self, app, resources):
        assert update_venue(resources['gym_id'], venue_id=99) is False
        assert update_equipment(resources['projector_id']) is False

    def test_missing_rows(self, app, resources):
        assert update_venue(999, venue_name='Nowhere') is False
        assert update_equipment(999, quantity=3) is False
        assert update_organization(999, org_code='X') is False

    def test_update_equipment(self, app, resources):
        update_equipment(resources['speaker_id'], quantity=4, description='Two speakers, two mics')

        item = get_equipment_by_id(resources['speaker_id'])
        assert item['quantity'] == 4
        assert item['equipment_name'] == 'Sound System'
        assert get_equipment_by_id(999) is None

    def test_update_organization(self, app, resources):
        update_organization(resources['other_org_id'], org_code='SSC')

        org = get_organization_by_id(resources['other_org_id'])
        assert org['org_code'] == 'SSC'
        assert org['org_name'] == 'Student Council'


class TestRemoveVenue:
    """Tests for remove_venue."""

    def test_open_reservations_are_cancelled(self, app, resources):
        pending = _book(resources, resources['gym_id'], '08:00', '09:00')
        reserved = _book(resources, resources['gym_id'], '09:00', '10:00', STATUS_RESERVED)
        rejected = _book(resources, resources['gym_id'], '10:00', '11:00', STATUS_REJECTED)
        elsewhere = _book(resources, resources['avr_id'], '08:00', '09:00')

        count = remove_venue(resources['gym_id'])

        assert count == 2
        assert get_venue_by_id(resources['gym_id']) is None
        assert get_reservation_by_id(pending)['reservation_status_id'] == STATUS_CANCELLED
        assert get_reservation_by_id(reserved)['reservation_status_id'] == STATUS_CANCELLED
        assert get_reservation_by_id(rejected)['reservation_status_id'] == STATUS_REJECTED
        assert get_reservation_by_id(elsewhere)['reservation_status_id'] == STATUS_PENDING
        for reservation_id in (pending, reserved, rejected):
            assert get_reservation_by_id(reservation_id)['venue_id'] is None
        assert get_reservation_by_id(elsewhere)['venue_id'] == resources['avr_id']

    def test_decision_time(self, app, resources):
        pending = _book(resources, resources['gym_id'], '08:00', '09:00')
        reserved = _book(resources, resources['gym_id'], '09:00', '10:00', STATUS_RESERVED)

        remove_venue(resources['gym_id'])

        assert get_reservation_by_id(pending)['decision_ts'] is not None
        assert get_reservation_by_id(reserved)['decision_ts'] == '2025-06-06T10:00:00+08:00'

    def test_cancelled_rows_are_published(self, app, resources):
        pending = _book(resources, resources['gym_id'], '08:00', '09:00')
        seen = []
        subscribe(seen.append)

        remove_venue(resources['gym_id'])

        assert [(c.event, c.reservation_id) for c in seen] == [('update', pending)]
        assert seen[0].row['status'] == 'Cancelled'
        assert seen[0].row['venue_name'] is None

    def test_unused_venue(self, app, resources):
        assert remove_venue(resources['avr_id']) == 0
        assert get_venue_by_id(resources['avr_id']) is None

    def test_unknown_venue(self, app, resources):
        with pytest.raises(ValueError):
            remove_venue(999)

    def test_details_after_removal(self, app, resources):
        pending = _book(resources, resources['gym_id'], '08:00', '09:00')
        remove_venue(resources['gym_id'])

        details = get_reservation_with_details(pending)
        assert details['venue_name'] is None
        assert details['org_code'] == 'JPCS'
