"""
Tests for CLI functionality.
"""

from __future__ import annotations

import argparse
import json
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from climate_envelope.cli import cmd_info, create_parser, main
from climate_envelope.config import Settings
from climate_envelope.errors import DataSourceUnavailable

if TYPE_CHECKING:
    from pathlib import Path


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self) -> None:
        parser = create_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "climate-envelope"

    def test_parser_has_version(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])

    def test_envelope_defaults(self) -> None:
        args = create_parser().parse_args(["envelope", "Eucalyptus saligna"])
        assert args.command == "envelope"
        assert args.species == ["Eucalyptus saligna"]
        assert args.mode == "summary"
        assert args.quantiles is None

    def test_envelope_options(self) -> None:
        args = create_parser().parse_args(
            ["envelope", "A b", "C d", "--mode", "cells", "--quantiles", "0.1", "0.9"]
        )
        assert args.species == ["A b", "C d"]
        assert args.mode == "cells"
        assert args.quantiles == [0.1, 0.9]

    def test_invalid_mode(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args(["envelope", "x", "--mode", "map"])

    def test_download_resolution_choices(self) -> None:
        args = create_parser().parse_args(["download", "--resolution", "2.5m"])
        assert args.resolution == "2.5m"
        with pytest.raises(SystemExit):
            create_parser().parse_args(["download", "--resolution", "1deg"])


class TestCommands:
    """Command handlers."""

    def test_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("climate_envelope.cli.get_settings", return_value=Settings()):
            assert cmd_info(argparse.Namespace()) == 0
        out = capsys.readouterr().out
        assert "climate-envelope" in out
        assert "prec, tavg" in out

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_download(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings = Settings(data_dir=tmp_path)
        with (
            patch("climate_envelope.cli.get_settings", return_value=settings),
            patch("climate_envelope.cli.worldclim.download_variable") as mock_dl,
        ):
            mock_dl.return_value = [tmp_path / "x" / "wc2.1_10m_prec_01.tif"] * 12
            assert main(["download", "--variables", "prec", "--resolution", "5m"]) == 0

        store = mock_dl.call_args.args[2]
        assert mock_dl.call_args.args[:2] == ("prec", "5m")
        assert store.base == tmp_path
        assert "12 monthly layers" in capsys.readouterr().out

    def test_envelope_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("climate_envelope.cli.envelope_flow") as mock_flow:
            mock_flow.return_value = {"Eucalyptus saligna": {"n_cells": 3}}
            assert main(["envelope", "Eucalyptus saligna", "--quantiles", "0.5"]) == 0

        kwargs = mock_flow.call_args.kwargs
        assert kwargs["mode"] == "summary"
        assert kwargs["quantiles"] == [0.5]
        assert json.loads(capsys.readouterr().out) == {"Eucalyptus saligna": {"n_cells": 3}}

    def test_envelope_to_file(self, tmp_path: Path) -> None:
        out = tmp_path / "out" / "envelope.json"
        with patch("climate_envelope.cli.envelope_flow", return_value={"x": []}):
            assert main(["envelope", "x", "--mode", "cells", "--output", str(out)]) == 0
        assert json.loads(out.read_text()) == {"x": []}

    def test_source_failure_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(
            "climate_envelope.cli.envelope_flow",
            side_effect=DataSourceUnavailable("GBIF request failed"),
        ):
            assert main(["envelope", "x"]) == 1
        assert "GBIF request failed" in capsys.readouterr().err
