"""
Shared helpers for tests
"""

TEST_PASSWORD = 'station-pass-123'


def login(client, username, password=TEST_PASSWORD):
    return client.post('/api/auth/login', json={'username': username, 'password': password})


def approved_permit(fleet, **overrides):
    """Permit payload that passes every approval check"""
    payload = {
        'permitStatus': 'approved',
        'transportOrderCode': 'LENH-001',
        'routeId': fleet.route.id,
        'departureDate': '2025-03-01',
        'departureTime': '08:30',
        'seatCount': 40,
    }
    payload.update(overrides)
    return payload


def entry_payload(fleet, **overrides):
    payload = {
        'vehicleId': fleet.vehicle.id,
        'driverId': fleet.driver.id,
    }
    payload.update(overrides)
    return payload
