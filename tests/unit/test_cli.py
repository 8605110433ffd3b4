"""Test the ``describe`` CLI command."""

from typing import Annotated

from click.testing import CliRunner

from message_mapping.cli import main
from message_mapping.mapping.annotations import Header, Headers


def sample_handler(
    trace: Annotated[str, Header("trace-id", required=False)],
    headers: Annotated[dict, Headers()],
    body: bytes,
) -> None: ...


def broken_handler(first: str, second: str) -> None: ...


not_callable = 42


class TestDescribe:
    def test_prints_binding_table(self):
        result = CliRunner().invoke(main, ["describe", f"{__name__}:sample_handler"])
        assert result.exit_code == 0, result.output
        assert "3 parameter(s)" in result.output
        assert "[0] trace: header_value" in result.output
        assert "key='trace-id' required=False" in result.output
        assert "[1] headers: header_map" in result.output
        assert "[2] body: message_or_payload type=bytes" in result.output

    def test_definition_error_exits_nonzero(self):
        result = CliRunner().invoke(main, ["describe", f"{__name__}:broken_handler"])
        assert result.exit_code == 1
        assert "only one Message or payload" in result.output

    def test_bad_target_format(self):
        result = CliRunner().invoke(main, ["describe", "no_colon_here"])
        assert result.exit_code == 2
        assert "module:callable" in result.output

    def test_missing_attribute(self):
        result = CliRunner().invoke(main, ["describe", f"{__name__}:nope"])
        assert result.exit_code == 2

    def test_not_callable(self):
        result = CliRunner().invoke(main, ["describe", f"{__name__}:not_callable"])
        assert result.exit_code == 2
        assert "not callable" in result.output
