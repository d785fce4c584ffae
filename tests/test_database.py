"""
Tests for engine configuration.
"""

from schoolpay.database import engine_options

from tests.conftest import make_settings


class TestEngineOptions:
    """Tests for engine_options."""

    def test_plain_connection_by_default(self):
        options = engine_options(make_settings())
        assert options["connect_args"] == {}
        assert options["pool_pre_ping"] is True

    def test_ssl_passed_as_connect_argument(self):
        options = engine_options(make_settings(database_ssl=True))
        assert options["connect_args"] == {"ssl": True}

    def test_echo_follows_debug(self):
        assert engine_options(make_settings(debug=True))["echo"] is True
        assert engine_options(make_settings(debug=False))["echo"] is False
