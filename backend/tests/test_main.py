"""Tests for the application factory."""

from fastapi.testclient import TestClient

from stockstream.config import Settings
from stockstream.main import create_app
from stockstream.market.seed_prices import SEED_PRICES


class TestCreateApp:
    """Tests for create_app wiring and lifespan."""

    def test_scheduler_runs_with_lifespan(self, catalog, scripted_source):
        """Test that the tick scheduler starts and stops with the app."""
        app = create_app(Settings(tick_interval=0.01), price_source=scripted_source, catalog=catalog)
        scheduler = app.state.scheduler
        assert not scheduler.running

        with TestClient(app):
            assert scheduler.running

        assert not scheduler.running

    def test_settings_are_applied(self, catalog, scripted_source):
        """Test that tick interval and symbols come from the arguments."""
        app = create_app(Settings(tick_interval=0.05), price_source=scripted_source, catalog=catalog)
        assert app.state.scheduler.interval == 0.05
        assert set(app.state.scheduler.symbols) == set(catalog)

    def test_default_catalog_and_source(self):
        """Test that the built-in catalog and GBM source are used by default."""
        app = create_app(Settings())
        assert set(app.state.scheduler.symbols) == set(SEED_PRICES)
