"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from art_catalog.catalog import read_catalog
from art_catalog.cli import app
from art_catalog.models import PieceId

runner = CliRunner()


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    result = runner.invoke(app, ["init", str(tmp_path)])
    assert result.exit_code == 0, result.output
    return tmp_path


def invoke(catalog_dir: Path, *args: str):
    return runner.invoke(app, [*args, "--dir", str(catalog_dir)])


class TestInit:
    """Tests for catalog creation."""

    def test_creates_empty_catalog(self, catalog_dir: Path) -> None:
        payload = json.loads((catalog_dir / "data.json").read_text(encoding="utf-8"))
        assert payload["schema_version"] == 2
        assert payload["pieces"] == {}

    def test_refuses_to_overwrite(self, catalog_dir: Path) -> None:
        result = runner.invoke(app, ["init", str(catalog_dir)])
        assert result.exit_code == 1

    def test_missing_catalog_reported(self, tmp_path: Path) -> None:
        result = invoke(tmp_path, "tags")
        assert result.exit_code == 1
        assert "No catalog" in result.output


class TestEditing:
    """add-piece, tag and ingest."""

    def test_add_piece(self, catalog_dir: Path) -> None:
        result = invoke(
            catalog_dir, "add-piece", "Harbour", "--base", "40", "--tip", "5", "--added", "10/20/2011"
        )
        assert result.exit_code == 0, result.output
        piece = read_catalog(catalog_dir / "data.json").pieces[PieceId(0)]
        assert piece.description == "Harbour"
        assert piece.total_price == 45
        assert piece.added.isoformat() == "2011-10-20"

    def test_add_piece_bad_date(self, catalog_dir: Path) -> None:
        result = invoke(catalog_dir, "add-piece", "Harbour", "--added", "2011-10-20")
        assert result.exit_code == 1

    def test_tag_creates_tag_and_category(self, catalog_dir: Path) -> None:
        invoke(catalog_dir, "add-piece", "Harbour")
        result = invoke(catalog_dir, "tag", "0", "dusk", "--category", "time")
        assert result.exit_code == 0, result.output

        catalog = read_catalog(catalog_dir / "data.json")
        tag = catalog.find_tag_in_category("dusk", "time")
        assert tag is not None
        assert catalog.has_tag(PieceId(0), tag)

        result = invoke(catalog_dir, "tag", "0", "dusk", "--category", "time")
        assert "already has tag" in result.output
        assert len(read_catalog(catalog_dir / "data.json").tags) == 1

    def test_tag_missing_piece(self, catalog_dir: Path) -> None:
        result = invoke(catalog_dir, "tag", "7", "dusk")
        assert result.exit_code == 1

    def test_ingest_deduplicates(self, catalog_dir: Path, tmp_path_factory: pytest.TempPathFactory) -> None:
        source = tmp_path_factory.mktemp("media")
        first = source / "a.png"
        second = source / "b.png"
        first.write_bytes(b"same bytes")
        second.write_bytes(b"same bytes")
        invoke(catalog_dir, "add-piece", "Harbour")

        result = invoke(catalog_dir, "ingest", str(first), "--piece", "0")
        assert result.exit_code == 0, result.output
        assert (catalog_dir / "[0] a.png").read_bytes() == b"same bytes"

        result = invoke(catalog_dir, "ingest", str(second), "--piece", "0")
        assert result.exit_code == 0, result.output
        assert "SKIP" in result.output

        catalog = read_catalog(catalog_dir / "data.json")
        assert len(catalog.blobs) == 1
        assert list(catalog.blobs_for_piece(PieceId(0))) == [next(iter(catalog.blobs))]


class TestSearch:
    """Search output and error reporting."""

    @pytest.fixture
    def populated(self, catalog_dir: Path) -> Path:
        invoke(catalog_dir, "add-piece", "Yumi casual", "--base", "40", "--tip", "10")
        invoke(catalog_dir, "add-piece", "Yumi teaching", "--base", "60")
        invoke(catalog_dir, "tag", "0", "yumi_lovelace")
        invoke(catalog_dir, "tag", "1", "yumi_lovelace")
        invoke(catalog_dir, "tag", "0", "casual_outfit", "--category", "outfit")
        return catalog_dir

    def test_search_lists_matches_and_summary(self, populated: Path) -> None:
        result = invoke(populated, "search", "outfit:casual_outfit")
        assert result.exit_code == 0, result.output
        assert "Yumi casual" in result.output
        assert "Yumi teaching" not in result.output
        assert "Tip Percentage: 20%" in result.output
        assert "Piece Count: 1" in result.output

    def test_search_no_results(self, populated: Path) -> None:
        result = invoke(populated, "search", "casual_outfit !casual_outfit")
        assert result.exit_code == 0
        assert "No pieces found" in result.output

    def test_syntax_error(self, populated: Path) -> None:
        result = invoke(populated, "search", "(yumi_lovelace")
        assert result.exit_code == 1
        assert "invalid query at position" in result.output

    def test_tags_listing(self, populated: Path) -> None:
        result = invoke(populated, "tags")
        assert result.exit_code == 0, result.output
        assert "yumi_lovelace" in result.output
        assert "outfit" in result.output

    def test_show_piece(self, populated: Path) -> None:
        result = invoke(populated, "show-piece", "0")
        assert result.exit_code == 0, result.output
        assert "Yumi casual" in result.output
        assert "casual_outfit" in result.output

    def test_show_missing_piece(self, populated: Path) -> None:
        result = invoke(populated, "show-piece", "42")
        assert result.exit_code == 1
        assert "Piece not found" in result.output


class TestMigrate:
    """Rewriting a legacy catalog."""

    def test_migrate_legacy_file(self, tmp_path: Path) -> None:
        source = tmp_path / "old.json"
        source.write_text(
            json.dumps(
                {
                    "schema_version": 1,
                    "pieces": {"0": {"name": "Old piece", "added": "2010-01-01T00:00:00"}},
                }
            ),
            encoding="utf-8",
        )
        dest = tmp_path / "new.json"
        result = runner.invoke(app, ["migrate", str(source), str(dest)])
        assert result.exit_code == 0, result.output

        payload = json.loads(dest.read_text(encoding="utf-8"))
        assert payload["schema_version"] == 2
        assert payload["pieces"]["0"]["description"] == "Old piece"

    def test_migrate_rejects_garbage(self, tmp_path: Path) -> None:
        source = tmp_path / "old.json"
        source.write_text("{}", encoding="utf-8")
        result = runner.invoke(app, ["migrate", str(source), str(tmp_path / "new.json")])
        assert result.exit_code == 1
