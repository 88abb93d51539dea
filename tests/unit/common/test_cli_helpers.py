"""Tests for common.cli_helpers module."""

import argparse

import pytest

from common.cli_helpers import add_common_args, positive_int


class TestPositiveInt:
    def test_valid(self) -> None:
        assert positive_int("3") == 3

    @pytest.mark.parametrize("value", ["0", "-2", "three", "1.5"])
    def test_invalid(self, value) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int(value)


class TestAddCommonArgs:
    def test_defaults(self) -> None:
        parser = argparse.ArgumentParser()
        add_common_args(parser)

        args = parser.parse_args([])

        assert args.config is None
        assert args.log_level == "INFO"

    def test_overrides(self) -> None:
        parser = argparse.ArgumentParser()
        add_common_args(parser)

        args = parser.parse_args(["--config", "dev", "--log-level", "DEBUG"])

        assert args.config == "dev"
        assert args.log_level == "DEBUG"
