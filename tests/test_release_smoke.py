from click.testing import CliRunner
from regionrisk.cli import cli
from regionrisk import __version__

def test_sdk_version():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"regionrisk {__version__}"

def test_cli_help_text():
    runner = CliRunner()
    result = runner.invoke(cli, ["compute", "--help"])
    assert result.exit_code == 0
    assert "--participants" in result.output
    assert "--experts" in result.output
    assert "--repeat-visits" in result.output
    assert "--config" in result.output
    assert "pretty" in result.output
    assert "json" in result.output
