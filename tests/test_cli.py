"""
Tests for the operator CLI.
"""

import logging

import pytest
from sqlalchemy.orm import sessionmaker
from typer.testing import CliRunner

import shared.infrastructure.db as db_module
from cli import app
from shared.infrastructure.db import build_engine

runner = CliRunner()


@pytest.fixture
def cli_database(tmp_path, monkeypatch):
    """Point the CLI at a throwaway file database and restore logging afterwards."""
    test_engine = build_engine(f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr(db_module, "engine", test_engine)
    monkeypatch.setattr(
        db_module,
        "SessionLocal",
        sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False),
    )

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        yield test_engine
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
        test_engine.dispose()


class TestCli:
    """Tests for CLI commands."""

    def test_db_init_then_menu_seed(self, cli_database):
        """Should create the schema and load the menu once."""
        result = runner.invoke(app, ["db-init"])
        assert result.exit_code == 0, result.output
        assert "Schema ready" in result.output

        result = runner.invoke(app, ["menu-seed"])
        assert result.exit_code == 0, result.output
        assert "12 new items" in result.output

        result = runner.invoke(app, ["menu-seed"])
        assert result.exit_code == 0, result.output
        assert "0 new items" in result.output

    def test_menu_list_shows_prices(self, cli_database):
        """Should print menu items with formatted prices."""
        runner.invoke(app, ["db-init"])
        runner.invoke(app, ["menu-seed"])

        result = runner.invoke(app, ["menu-list", "--type", "food"])

        assert result.exit_code == 0, result.output
        assert "Muffin" in result.output
        assert "2.50" in result.output
        assert "Latte" not in result.output

    def test_menu_show_item(self, cli_database):
        """Should print one menu item with its price."""
        runner.invoke(app, ["db-init"])
        runner.invoke(app, ["menu-seed"])

        result = runner.invoke(app, ["menu-show", "Latte"])

        assert result.exit_code == 0, result.output
        assert "Latte" in result.output
        assert "4.25" in result.output

    def test_menu_show_unknown_item(self, cli_database):
        """Should exit with an error for a name not on the menu."""
        runner.invoke(app, ["db-init"])

        result = runner.invoke(app, ["menu-show", "Pizza"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_order_show_unknown_order(self, cli_database):
        """Should exit with an error for an unknown order."""
        runner.invoke(app, ["db-init"])

        result = runner.invoke(app, ["order-show", "99"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_orders_open_empty(self, cli_database):
        """Should report when there are no open orders."""
        runner.invoke(app, ["db-init"])

        result = runner.invoke(app, ["orders-open"])

        assert result.exit_code == 0, result.output
        assert "No open orders" in result.output
