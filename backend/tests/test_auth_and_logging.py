import json
import logging
from datetime import timedelta

from campus_connect.logging_config import JSONFormatter, redact_sensitive_data
from campus_connect.services.auth_service import AuthService


def test_access_token_carries_email_and_role():
    svc = AuthService()
    access, refresh = svc.create_tokens("uid-1", "asha@campus.edu", "student")

    access_data = svc.decode_token(access)
    refresh_data = svc.decode_token(refresh)

    assert (access_data.user_id, access_data.email, access_data.role, access_data.type) == (
        "uid-1",
        "asha@campus.edu",
        "student",
        "access",
    )
    assert refresh_data.type == "refresh"
    assert refresh_data.role is None


def test_expired_or_garbage_tokens_decode_to_none():
    svc = AuthService()
    svc.access_token_expires = timedelta(seconds=-5)

    assert svc.decode_token(svc.create_access_token("uid-1", "a@b.c", "student")) is None
    assert svc.decode_token("not-a-jwt") is None


def test_redaction_is_recursive_and_case_insensitive():
    data = {"Email": "a@b.c", "nested": [{"password": "x", "subject_id": 3}]}

    assert redact_sensitive_data(data) == {
        "Email": "[REDACTED]",
        "nested": [{"password": "[REDACTED]", "subject_id": 3}],
    }


def test_json_formatter_emits_one_line_with_extra_context():
    record = logging.LogRecord("campus_connect.test", logging.WARNING, __file__, 1, "skipped %s", ("s1",), None)
    record.subject_id = 4
    record.email = "a@b.c"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["msg"] == "skipped s1"
    assert payload["extra_context"] == {"subject_id": 4, "email": "[REDACTED]"}
