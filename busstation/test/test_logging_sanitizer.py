"""
Test the logging sanitizer utility.
Verifies credentials and tokens are redacted before payloads reach the logs.
"""

from werkzeug.datastructures import ImmutableMultiDict

from busstation.utils.logging_sanitizer import (
    SENSITIVE_FIELDS,
    sanitize_dict,
    sanitize_exception_message,
    sanitize_form_data,
    sanitize_request_payload,
)


def test_sanitize_dict():
    """Test dictionary sanitization"""
    result = sanitize_dict({'username': 'dispatcher', 'password': 'secret123', 'email': 'd@example.com'})
    assert result['username'] == 'dispatcher', "Username should not be redacted"
    assert result['password'] == '[REDACTED]', "Password should be redacted"
    assert result['email'] == 'd@example.com', "Email should not be redacted"

    # Case insensitivity
    result = sanitize_dict({'Password': 'a', 'PASSWORD': 'b', 'Auth_Token': 'c'})
    assert set(result.values()) == {'[REDACTED]'}, "Sensitive keys match regardless of case"

    # Nested dictionaries and lists
    result = sanitize_dict({
        'user': {'username': 'dispatcher', 'password': 'secret123'},
        'tokens': [{'access_token': 'abc'}, {'note': 'keep'}],
    })
    assert result['user']['username'] == 'dispatcher'
    assert result['user']['password'] == '[REDACTED]', "Nested password should be redacted"
    assert result['tokens'][0]['access_token'] == '[REDACTED]', "Dicts inside lists should be redacted"
    assert result['tokens'][1]['note'] == 'keep'


def test_empty_input_is_returned_unchanged():
    assert sanitize_dict({}) == {}
    assert sanitize_dict(None) is None


def test_sanitize_form_data():
    """Test Flask form data sanitization"""
    form_data = ImmutableMultiDict([
        ('username', 'dispatcher'),
        ('password', 'secret123'),
        ('csrf_token', 'abc'),
    ])
    result = sanitize_form_data(form_data)
    assert result['username'] == 'dispatcher'
    assert result['password'] == '[REDACTED]'
    assert result['csrf_token'] == '[REDACTED]'


def test_sanitize_request_payload(app):
    with app.test_request_context('/api/auth/login', method='POST',
                                  json={'username': 'dispatcher', 'password': 'pw'}):
        from flask import request
        assert sanitize_request_payload(request) == {'username': 'dispatcher', 'password': '[REDACTED]'}


def test_all_sensitive_fields():
    """Verify every configured sensitive field is redacted"""
    test_data = {field: f"sensitive_{field}_value" for field in SENSITIVE_FIELDS}
    result = sanitize_dict(test_data)
    for field in SENSITIVE_FIELDS:
        assert result[field] == '[REDACTED]', f"Field '{field}' should be redacted"


def test_exception_messages():
    assert sanitize_exception_message(ValueError('route not found')) == 'route not found'
    hidden = sanitize_exception_message(ValueError('bad password for admin'))
    assert hidden == 'ValueError: [Message contains sensitive data]'
