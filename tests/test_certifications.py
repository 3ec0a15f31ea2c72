import threading
from unittest.mock import MagicMock, Mock, patch

import pytest
from requests.exceptions import ConnectionError, Timeout

from account_console.certifications import (
    CertificationError,
    CertificationFetcher,
    HttpCertificationSource,
    StaticCertificationSource,
)
from account_console.models import Certification, Certifier
from account_console.store import AccountStore


@pytest.mark.unit
class TestHttpCertificationSource:
    def test_init_strips_trailing_slash(self):
        source = HttpCertificationSource("http://example.com/")
        assert source.base_url == "http://example.com"

    def test_certifications_success(self, address):
        source = HttpCertificationSource("http://example.com", timeout=3)

        with patch("requests.get") as mock_get:
            mock_response = Mock()
            mock_response.status_code = 200
            mock_response.json.return_value = [
                {"name": "smsverification", "title": "SMS", "id": 1}
            ]
            mock_get.return_value = mock_response

            result = source.certifications(address)

        mock_get.assert_called_once_with(
            f"http://example.com/certifications/{address}", timeout=3
        )
        assert result == [Certification(name="smsverification", title="SMS", id=1)]

    def test_certifiers_success(self):
        source = HttpCertificationSource("http://example.com")

        with patch("requests.get") as mock_get:
            mock_response = Mock()
            mock_response.status_code = 200
            mock_response.json.return_value = [{"id": "2", "name": "email"}]
            mock_get.return_value = mock_response

            assert source.certifiers() == [Certifier(id=2, name="email")]

    def test_http_error(self, address):
        source = HttpCertificationSource("http://example.com")

        with patch("requests.get") as mock_get:
            mock_response = Mock()
            mock_response.status_code = 500
            mock_get.return_value = mock_response

            with pytest.raises(CertificationError, match="HTTP 500"):
                source.certifications(address)

    def test_timeout(self):
        source = HttpCertificationSource("http://example.com")

        with patch("requests.get") as mock_get:
            mock_get.side_effect = Timeout("Timeout")
            with pytest.raises(CertificationError, match="timed out"):
                source.certifiers()

    def test_connection_error(self):
        source = HttpCertificationSource("http://example.com")

        with patch("requests.get") as mock_get:
            mock_get.side_effect = ConnectionError("refused")
            with pytest.raises(CertificationError, match="Connection error"):
                source.certifiers()

    def test_invalid_json(self):
        source = HttpCertificationSource("http://example.com")

        with patch("requests.get") as mock_get:
            mock_response = Mock()
            mock_response.status_code = 200
            mock_response.json.side_effect = ValueError("bad json")
            mock_get.return_value = mock_response

            with pytest.raises(CertificationError, match="Invalid JSON"):
                source.certifiers()


@pytest.mark.unit
class TestCertificationFetcher:
    @pytest.fixture
    def source(self, address):
        return StaticCertificationSource(
            {address: [{"name": "smsverification-1"}]},
            [{"id": 1, "name": "smsverification"}],
        )

    def test_fetch_certifiers(self, source):
        store = AccountStore()
        CertificationFetcher(store, source, background=False).fetch_certifiers()
        assert store.certifiers == [Certifier(id=1, name="smsverification")]

    def test_fetch_certifications_for_visible_address(self, source, address):
        store = AccountStore()
        store.set_visible_accounts([address])

        CertificationFetcher(store, source, background=False).fetch_certifications(
            address
        )

        assert store.certifications[address] == [Certification(name="smsverification-1")]

    def test_result_for_hidden_address_is_discarded(self, source, address, other_address):
        store = AccountStore()
        store.set_visible_accounts([other_address])

        CertificationFetcher(store, source, background=False).fetch_certifications(
            address
        )

        assert address not in store.certifications

    def test_visibility_check_and_merge_are_one_store_call(self, source, address):
        store = MagicMock()

        CertificationFetcher(store, source, background=False).fetch_certifications(
            address
        )

        store.set_certifications_if_visible.assert_called_once_with(
            address, [Certification(name="smsverification-1")]
        )
        store.is_visible.assert_not_called()
        store.set_certifications.assert_not_called()

    def test_failure_is_reported_as_error(self, address):
        store = AccountStore()
        store.set_visible_accounts([address])
        source = MagicMock()
        source.certifications.side_effect = CertificationError("HTTP 503 from x")

        CertificationFetcher(store, source, background=False).fetch_certifications(
            address
        )

        assert len(store.errors) == 1
        assert "HTTP 503" in str(store.errors[0])
        assert address not in store.certifications

    def test_background_fetch_runs_on_worker_thread(self, source):
        store = AccountStore()
        done = threading.Event()
        store.subscribe(done.set)

        CertificationFetcher(store, source).fetch_certifiers()

        assert done.wait(timeout=5)
        assert [c.name for c in store.certifiers] == ["smsverification"]
