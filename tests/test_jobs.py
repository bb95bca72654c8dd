"""Tests for the archive build job."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from cardforge.jobs.build_cards import (
    BuildReport,
    VerificationError,
    build_arg_parser,
    main,
    run_build,
)
from cardforge.models.card import CardCollection, CardDef
from cardforge.models.failure import FailureKind
from cardforge.services.archive import load_cards


class TestRunBuild:
    def test_build_and_verify(self, carddefs_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "cards.dat"

        report = run_build(carddefs_path, "enUS", output)

        assert isinstance(report, BuildReport)
        assert report.parsed == 3
        assert report.loaded == 3
        assert report.load_seconds is not None
        assert output.exists()
        assert load_cards(output).get_by_card_id("EX1_116") is not None

    def test_skip_verify(self, carddefs_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "cards.dat"

        with patch("cardforge.jobs.build_cards.load_cards") as mock_load:
            report = run_build(carddefs_path, "enUS", output, verify=False)

        mock_load.assert_not_called()
        assert report.loaded is None
        assert report.load_seconds is None

    def test_verification_mismatch(self, carddefs_path: Path, tmp_path: Path) -> None:
        with (
            patch(
                "cardforge.jobs.build_cards.load_cards",
                return_value=CardCollection(cards=[CardDef()]),
            ),
            pytest.raises(VerificationError) as exc_info,
        ):
            run_build(carddefs_path, "enUS", tmp_path / "cards.dat")

        assert exc_info.value.kind is FailureKind.VERIFICATION
        assert "parsed 3 cards, loaded 1" in str(exc_info.value)

    def test_logs_timings(
        self, carddefs_path: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            run_build(carddefs_path, "enUS", tmp_path / "cards.dat")

        assert "Finished parsing 3 cards" in caplog.text
        assert "Saved compressed cards" in caplog.text
        assert "Read 3 cards" in caplog.text


class TestMain:
    def test_success(self, carddefs_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "out.dat"

        code = main(["--source", str(carddefs_path), "--output", str(output), "--level", "9"])

        assert code == 0
        assert len(load_cards(output)) == 3

    def test_missing_source_fails(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            code = main(["--source", str(tmp_path / "missing.xml"), "--output", str(tmp_path)])

        assert code == 1
        assert "Card archive build failed" in caplog.text

    def test_invalid_level_fails(self, carddefs_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "out.dat"

        code = main(["--source", str(carddefs_path), "--output", str(output), "--level", "99"])

        assert code == 1
        assert not output.exists()

    def test_defaults_come_from_settings(self) -> None:
        args = build_arg_parser().parse_args([])

        assert args.source == Path("hsdata/CardDefs.xml")
        assert args.locale == "enUS"
        assert args.output == Path("cards.dat")
        assert args.level == 4
        assert args.skip_verify is False
