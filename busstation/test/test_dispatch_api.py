"""
Tests for the dispatch workflow HTTP API
"""

from busstation.test.helpers import approved_permit, entry_payload


def _create(client, fleet, **overrides):
    response = client.post('/api/dispatch', json=entry_payload(fleet, **overrides))
    assert response.status_code == 201, response.get_json()
    return response.get_json()['dispatch']


class TestAuthentication:

    def test_requires_login(self, client):
        response = client.get('/api/dispatch')
        assert response.status_code == 401
        assert response.get_json()['code'] == 'UNAUTHORIZED'

    def test_workflow_step_requires_login(self, client, fleet):
        response = client.post('/api/dispatch/1/payment', json={'paymentAmount': 100})
        assert response.status_code == 401


class TestWorkflow:

    def test_full_flow(self, auth_client, fleet):
        dispatch = _create(auth_client, fleet)
        record_id = dispatch['id']
        assert dispatch['currentStatus'] == 'entered'
        assert dispatch['displayStatus'] == 'in-station'

        response = auth_client.post(f'/api/dispatch/{record_id}/passenger-drop', json={'passengersArrived': 15})
        assert response.status_code == 200
        assert response.get_json()['message'] == 'Passenger drop recorded'

        response = auth_client.post(f'/api/dispatch/{record_id}/permit', json=approved_permit(fleet))
        assert response.status_code == 200
        assert response.get_json()['dispatch']['displayStatus'] == 'permit-issued'

        response = auth_client.post(f'/api/dispatch/{record_id}/payment',
                                    json={'paymentAmount': 150000, 'paymentMethod': 'cash'})
        assert response.status_code == 200
        assert response.get_json()['dispatch']['paymentAmount'] == 150000.0

        response = auth_client.post(f'/api/dispatch/{record_id}/departure-order', json={'passengersDeparting': 30})
        assert response.status_code == 200
        assert response.get_json()['dispatch']['displayStatus'] == 'departed'

        response = auth_client.post(f'/api/dispatch/{record_id}/exit')
        assert response.status_code == 200
        final = response.get_json()['dispatch']
        assert final['currentStatus'] == 'departed'
        assert final['exitTime'] is not None
        assert final['exitBy'] == fleet.user.id

    def test_detail_lists_allowed_transitions(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        data = auth_client.get(f'/api/dispatch/{record_id}').get_json()
        assert data['allowedTransitions'] == sorted(
            ['passengers_dropped', 'permit_issued', 'permit_rejected', 'paid']
        )

    def test_missing_record(self, auth_client):
        response = auth_client.get('/api/dispatch/999')
        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'


class TestErrors:

    def test_permit_without_code_is_400(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        response = auth_client.post(f'/api/dispatch/{record_id}/permit',
                                    json=approved_permit(fleet, transportOrderCode=''))
        assert response.status_code == 400
        body = response.get_json()
        assert body['code'] == 'VALIDATION_ERROR'
        assert 'transportOrderCode' in body['fieldErrors']

    def test_duplicate_code_is_409(self, auth_client, fleet):
        first = _create(auth_client, fleet)['id']
        second = _create(auth_client, fleet, vehicleId=fleet.spare_vehicle.id)['id']
        assert auth_client.post(f'/api/dispatch/{first}/permit', json=approved_permit(fleet)).status_code == 200

        response = auth_client.post(f'/api/dispatch/{second}/permit', json=approved_permit(fleet))
        assert response.status_code == 409
        body = response.get_json()
        assert body['code'] == '23505'
        assert body['field'] == 'transportOrderCode'

    def test_invalid_transition_is_422(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        response = auth_client.post(f'/api/dispatch/{record_id}/exit')
        assert response.status_code == 422
        body = response.get_json()
        assert body['code'] == 'INVALID_TRANSITION'
        assert body['currentStatus'] == 'entered'
        assert body['targetStatus'] == 'departed'

    def test_array_body_is_400(self, auth_client):
        response = auth_client.post('/api/dispatch/permit/validate', json=[1, 2])
        assert response.status_code == 400
        body = response.get_json()
        assert body['code'] == 'VALIDATION_ERROR'
        assert body['fieldErrors'] == {'__root__': 'Expected an object'}

    def test_permit_with_bad_seat_count_lists_every_field(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        response = auth_client.post(f'/api/dispatch/{record_id}/permit',
                                    json=approved_permit(fleet, transportOrderCode='', seatCount='abc'))
        assert response.status_code == 400
        assert {'transportOrderCode', 'seatCount'} <= set(response.get_json()['fieldErrors'])

    def test_unknown_vehicle_is_400(self, auth_client, fleet):
        response = auth_client.post('/api/dispatch', json=entry_payload(fleet, vehicleId=4242))
        assert response.status_code == 400
        assert 'vehicleId' in response.get_json()['fieldErrors']


class TestEntryEdits:

    def test_update_entry(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        response = auth_client.put(f'/api/dispatch/{record_id}', json={'notes': 'Checked tyres'})
        assert response.status_code == 200
        assert response.get_json()['dispatch']['notes'] == 'Checked tyres'

    def test_update_after_permit_is_422(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        auth_client.post(f'/api/dispatch/{record_id}/permit', json=approved_permit(fleet))
        response = auth_client.put(f'/api/dispatch/{record_id}', json={'notes': 'Too late'})
        assert response.status_code == 422

    def test_entry_image(self, auth_client, fleet):
        record_id = _create(auth_client, fleet)['id']
        response = auth_client.patch(f'/api/dispatch/{record_id}/entry-image',
                                     json={'entryImageUrl': 'https://img.example.com/a.jpg'})
        assert response.get_json()['message'] == 'Entry image updated'
        response = auth_client.patch(f'/api/dispatch/{record_id}/entry-image', json={'entryImageUrl': None})
        assert response.get_json()['message'] == 'Entry image removed'
        assert response.get_json()['dispatch']['entryImageUrl'] is None


class TestQueries:

    def test_list_filters_by_status(self, auth_client, fleet):
        first = _create(auth_client, fleet)['id']
        _create(auth_client, fleet, vehicleId=fleet.spare_vehicle.id)
        auth_client.post(f'/api/dispatch/{first}/permit', json=approved_permit(fleet))

        items = auth_client.get('/api/dispatch?status=permit_issued').get_json()
        assert [item['id'] for item in items] == [first]
        assert len(auth_client.get('/api/dispatch').get_json()) == 2

    def test_list_rejects_unknown_status(self, auth_client):
        response = auth_client.get('/api/dispatch?status=lost')
        assert response.status_code == 400
        assert 'status' in response.get_json()['fieldErrors']

    def test_board(self, auth_client, fleet):
        first = _create(auth_client, fleet)['id']
        _create(auth_client, fleet, vehicleId=fleet.spare_vehicle.id)
        auth_client.post(f'/api/dispatch/{first}/permit', json=approved_permit(fleet))

        board = auth_client.get('/api/dispatch/board').get_json()
        assert board['counts']['in-station'] == 1
        assert board['counts']['permit-issued'] == 1
        assert board['pollIntervalSeconds'] == 30

        searched = auth_client.get('/api/dispatch/board?search=999').get_json()
        assert searched['total'] == 1

    def test_statuses(self, auth_client):
        options = auth_client.get('/api/dispatch/statuses').get_json()
        assert [o['value'] for o in options][0] == 'entered'
        assert len(options) == 7

    def test_validate_permit_writes_nothing(self, auth_client, fleet):
        response = auth_client.post('/api/dispatch/permit/validate', json={'routeId': fleet.route.id})
        body = response.get_json()
        assert response.status_code == 200
        assert body['isValid'] is False
        assert 'routeId' not in body['fieldErrors']
        assert 'transportOrderCode' in body['fieldErrors']
