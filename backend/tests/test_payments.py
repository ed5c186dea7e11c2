from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
import requests

from domain.errors import NotFoundError, PaymentError
from services import payments


class DummyResponse:
    def __init__(self, json_data, status_code=200):
        self._json = json_data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._json


@pytest.fixture
def stripe_key(monkeypatch):
    monkeypatch.setattr(payments.settings, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(payments.settings, "STRIPE_API_BASE", "https://stripe.test/v1")


def test_catalog_prices():
    assert payments.get_feature("premium_styles").price_cents == 99
    assert payments.get_feature("unlimited_generation").price_cents == 199
    assert payments.get_feature("advanced_presets").price_cents == 149
    assert all(f.duration_days == 30 for f in payments.PREMIUM_FEATURES.values())


def test_unknown_feature():
    with pytest.raises(NotFoundError):
        payments.get_feature("gold_plating")


def test_create_payment_intent_posts_form(stripe_key):
    captured = {}

    def fake_post(url, auth=None, data=None, timeout=None):
        captured.update(url=url, auth=auth, data=data, timeout=timeout)
        return DummyResponse(
            {"id": "pi_1", "amount": 99, "currency": "usd", "status": "requires_payment_method", "client_secret": "sec"}
        )

    with patch.object(payments._session, "post", side_effect=fake_post):
        intent = payments.create_payment_intent("42", "premium_styles")

    assert intent.id == "pi_1"
    assert intent.client_secret == "sec"
    assert captured["url"] == "https://stripe.test/v1/payment_intents"
    assert captured["auth"] == ("sk_test_123", "")
    assert captured["data"]["amount"] == 99
    assert captured["data"]["metadata[user_id]"] == "42"
    assert captured["data"]["metadata[feature_id]"] == "premium_styles"
    assert captured["data"]["metadata[duration]"] == "30"


def test_payment_intent_requires_key(monkeypatch):
    monkeypatch.setattr(payments.settings, "STRIPE_SECRET_KEY", None)
    with pytest.raises(PaymentError):
        payments.create_payment_intent("42", "premium_styles")


def test_provider_failures_become_payment_errors(stripe_key):
    with patch.object(payments._session, "post", return_value=DummyResponse({}, status_code=402)):
        with pytest.raises(PaymentError) as exc_info:
            payments.create_payment_intent("42", "premium_styles")
    assert exc_info.value.status_code == 502

    with patch.object(payments._session, "post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(PaymentError):
            payments.create_payment_intent("42", "premium_styles")


def test_grant_and_check_premium(db_session):
    now = datetime(2025, 1, 1, 12, 0, 0)
    assert not payments.has_premium_access(db_session, "42", now=now)

    expires = payments.grant_feature(db_session, "42", "premium_styles", now=now)
    assert expires == now + timedelta(days=30)
    assert payments.check_premium_status(db_session, "42", now=now)
    assert payments.has_premium_access(db_session, "42", "premium_styles", now=now)
    assert not payments.check_premium_status(db_session, "42", now=expires + timedelta(seconds=1))


def test_grant_extends_active_subscription(db_session):
    now = datetime(2025, 1, 1)
    first = payments.grant_feature(db_session, "7", "premium_styles", now=now)
    second = payments.grant_feature(db_session, "7", "advanced_presets", now=now + timedelta(days=10))
    assert second == first + timedelta(days=30)


def test_grant_after_expiry_starts_from_now(db_session):
    now = datetime(2025, 1, 1)
    payments.grant_feature(db_session, "7", "premium_styles", now=now)
    later = now + timedelta(days=90)
    assert payments.grant_feature(db_session, "7", "premium_styles", now=later) == later + timedelta(days=30)


def test_free_features_and_anonymous_users(db_session):
    assert payments.has_premium_access(db_session, None, "basic_generation")
    assert not payments.has_premium_access(db_session, None, "premium_styles")
