"""Unit tests for uuid command."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from orbitctl.cli.main import app
from orbitctl.osquery.query import OsqueryError
from typer.testing import CliRunner

runner = CliRunner()

HOST_UUID = "4C4C4544-0042-3510-8052-B4C04F4E4E32"
OSQUERYD = "/opt/osquery/osqueryd"


class TestUuidCommand:
    """Tests for orbitctl uuid."""

    def test_requires_openframe_mode(self) -> None:
        result = runner.invoke(app, ["uuid"])

        assert result.exit_code == 1
        assert "only works in OpenFrame mode" in result.output

    def test_requires_osquery_path(self) -> None:
        result = runner.invoke(app, ["uuid", "--openframe-mode"])

        assert result.exit_code == 1
        assert "--openframe-osquery-path must be specified" in result.output

    @patch("orbitctl.cli.commands.uuid.get_host_uuid", return_value=HOST_UUID)
    def test_plain_output(self, mock_get: MagicMock) -> None:
        """The UUID is printed verbatim on its own line."""
        result = runner.invoke(
            app, ["uuid", "--openframe-mode", "--openframe-osquery-path", OSQUERYD]
        )

        assert result.exit_code == 0
        assert result.stdout == f"{HOST_UUID}\n"
        mock_get.assert_called_once_with(Path(OSQUERYD))

    @patch("orbitctl.cli.commands.uuid.get_host_uuid", return_value=HOST_UUID)
    def test_json_output(self, _mock_get: MagicMock) -> None:
        result = runner.invoke(
            app, ["uuid", "--json", "--openframe-mode", "--openframe-osquery-path", OSQUERYD]
        )

        assert result.exit_code == 0
        assert result.stdout == f'{{"uuid":"{HOST_UUID}"}}\n'

    @patch("orbitctl.cli.commands.uuid.get_host_uuid", return_value=HOST_UUID)
    def test_settings_from_env(self, mock_get: MagicMock) -> None:
        result = runner.invoke(
            app,
            ["uuid"],
            env={"ORBIT_OPENFRAME_MODE": "true", "ORBIT_OPENFRAME_OSQUERY_PATH": OSQUERYD},
        )

        assert result.exit_code == 0
        mock_get.assert_called_once_with(Path(OSQUERYD))

    @patch("orbitctl.cli.commands.uuid.get_host_uuid")
    def test_query_failure(self, mock_get: MagicMock) -> None:
        """A failed query prints nothing on stdout and exits 1."""
        mock_get.side_effect = OsqueryError("expected 1 row from UUID query, got 0")

        result = runner.invoke(
            app, ["uuid", "--openframe-mode", "--openframe-osquery-path", OSQUERYD]
        )

        assert result.exit_code == 1
        assert "failed to get host UUID" in result.output
        assert HOST_UUID not in result.output

    @patch("orbitctl.cli.commands.uuid.get_host_uuid", return_value=HOST_UUID)
    def test_accepts_root_dir(self, mock_get: MagicMock, tmp_path: Path) -> None:
        """--root-dir is resolved; the query still uses its own scratch database."""
        with patch(
            "orbitctl.cli.commands.uuid.resolve_root_dir", return_value=tmp_path
        ) as mock_resolve:
            result = runner.invoke(
                app,
                [
                    "uuid",
                    "--openframe-mode",
                    "--openframe-osquery-path",
                    OSQUERYD,
                    "--root-dir",
                    str(tmp_path),
                ],
            )

        assert result.exit_code == 0
        assert result.stdout == f"{HOST_UUID}\n"
        mock_resolve.assert_called_once_with(tmp_path)
        mock_get.assert_called_once_with(Path(OSQUERYD))

    @patch("orbitctl.cli.commands.uuid.get_host_uuid", return_value=HOST_UUID)
    def test_root_dir_from_env(self, _mock_get: MagicMock, tmp_path: Path) -> None:
        with patch("orbitctl.cli.commands.uuid.resolve_root_dir") as mock_resolve:
            result = runner.invoke(
                app,
                ["uuid", "--openframe-mode", "--openframe-osquery-path", OSQUERYD],
                env={"ORBIT_ROOT_DIR": str(tmp_path)},
            )

        assert result.exit_code == 0
        mock_resolve.assert_called_once_with(tmp_path)
