"""Unit tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from content_gate.cli import main as cli_main
from content_gate.fetch.metrics import ResolverMetrics
from content_gate.fetch.resolver import RedirectResolver
from content_gate.gate.collaborators import StaticDeviceClassifier, StaticUserIdentity
from content_gate.gate.evaluator import GateEvaluator
from content_gate.gate.metrics import GateMetrics
from content_gate.reachability.monitor import StaticConnectivityMonitor
from content_gate.reachability.probe import NetworkReachabilityProbe
from content_gate.settings.app import GateSettings
from content_gate.store.decisions import DecisionCache
from content_gate.store.keys import DecisionKeys
from content_gate.store.migrations import CURRENT_VERSION
from content_gate.store.protocols import PersistentStore
from content_gate.store.sqlite import SqliteStore
from tests.helpers.transport import ScriptedServer


URL = "https://gate.example/start"


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> CliRunner:
    """Create a CLI runner isolated from the caller's environment."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_PATH", "USER_ID", "DEVICE_MODEL"):
        monkeypatch.delenv(f"CONTENT_GATE_{name}", raising=False)
    return CliRunner()


@pytest.fixture
def server(monkeypatch: pytest.MonkeyPatch) -> ScriptedServer:
    """Route the CLI's evaluator to a scripted server."""
    scripted = ScriptedServer()

    def create_evaluator(
        settings: GateSettings, store: PersistentStore
    ) -> GateEvaluator:
        return GateEvaluator(
            store=store,
            reachability=NetworkReachabilityProbe(
                lambda: StaticConnectivityMonitor(True)
            ),
            resolver=RedirectResolver(transport=scripted.transport()),
            device_classifier=StaticDeviceClassifier(settings.device_model),
            user_identity=StaticUserIdentity(settings.user_id),
        )

    monkeypatch.setattr(cli_main, "create_evaluator", create_evaluator)
    return scripted


class TestEvaluateCommand:
    """Tests for the evaluate command."""

    def test_all_checks_pass(
        self, runner: CliRunner, server: ScriptedServer, tmp_path: Path
    ) -> None:
        """Test a passing evaluation prints the external result."""
        server.route("/start", 200)
        state = tmp_path / "state.sqlite"

        result = runner.invoke(
            cli_main.cli,
            [
                "evaluate",
                URL,
                "--target-date",
                "2020-01-01",
                "--state",
                str(state),
                "--user-id",
                "u1",
            ],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "should_show_external_content": True,
            "final_url": "https://gate.example/start?push_id=u1",
            "reason": "All checks passed",
        }
        with SqliteStore(state) as store:
            record = DecisionCache(store).load(DecisionKeys.derive(URL))
        assert record.external_content_shown

    def test_excluded_device(
        self, runner: CliRunner, server: ScriptedServer, tmp_path: Path
    ) -> None:
        """Test the device model option reaches the classifier."""
        server.route("/start", 200)

        result = runner.invoke(
            cli_main.cli,
            [
                "evaluate",
                URL,
                "--target-date",
                "2020-01-01",
                "--state",
                str(tmp_path / "state.sqlite"),
                "--device-model",
                "iPad",
            ],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["reason"] == "Device not supported"

    def test_show_metrics(
        self, runner: CliRunner, server: ScriptedServer, tmp_path: Path
    ) -> None:
        """Test --show-metrics reports counters after the result."""
        GateMetrics.reset()
        ResolverMetrics.reset()
        server.route("/start", 404)

        result = runner.invoke(
            cli_main.cli,
            [
                "evaluate",
                URL,
                "--target-date",
                "2020-01-01",
                "--state",
                str(tmp_path / "state.sqlite"),
                "--show-metrics",
            ],
        )

        assert result.exit_code == 0, result.output
        assert '"gate_evaluations_total": 1' in result.output
        assert '"resolver_probes_total": 1' in result.output

    def test_target_date_required(self, runner: CliRunner) -> None:
        """Test evaluate refuses to run without a target date."""
        result = runner.invoke(cli_main.cli, ["evaluate", URL])

        assert result.exit_code != 0
        assert "--target-date" in result.output


class TestResolveCommand:
    """Tests for the resolve command."""

    def test_invalid_url_exits_nonzero(self, runner: CliRunner) -> None:
        """Test an unusable URL is reported and exits 1."""
        result = runner.invoke(cli_main.cli, ["resolve", "ftp://files.example/x"])

        assert result.exit_code == 1
        output = json.loads(result.output)
        assert output["success"] is False
        assert output["reason"] == "Invalid URL"


class TestShowCommand:
    """Tests for the show command."""

    def test_show_persisted_decision(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test show prints the stored decision and path id."""
        state = tmp_path / "state.sqlite"
        keys = DecisionKeys.derive(URL)
        with SqliteStore(state) as store:
            cache = DecisionCache(store)
            cache.mark_external(keys, "https://content.example/?pathid=abc")
            cache.save_path_id(keys, "abc")

        result = runner.invoke(cli_main.cli, ["show", URL, "--state", str(state)])

        assert result.exit_code == 0, result.output
        output = json.loads(result.output)
        assert output["external_content_shown"] is True
        assert output["resolved_url"] == "https://content.example/?pathid=abc"
        assert output["path_id"] == "abc"

    def test_show_undecided(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test show reports an undecided key."""
        state = tmp_path / "state.sqlite"
        with SqliteStore(state):
            pass

        result = runner.invoke(cli_main.cli, ["show", URL, "--state", str(state)])

        assert result.exit_code == 0, result.output
        output = json.loads(result.output)
        assert output["external_content_shown"] is False
        assert output["app_content_shown"] is False
        assert output["path_id"] is None


class TestDumpCommand:
    """Tests for the dump command."""

    def test_dump_filters_by_prefix(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test dump lists matching entries with the schema version."""
        state = tmp_path / "state.sqlite"
        keys = DecisionKeys.derive(URL)
        with SqliteStore(state) as store:
            DecisionCache(store).mark_external(keys, "https://content.example/")

        result = runner.invoke(
            cli_main.cli, ["dump", "--state", str(state), "--prefix", "savedUrl_"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "schema_version": CURRENT_VERSION,
            "entries": {keys.saved_url: "https://content.example/"},
        }


class TestVersion:
    """Tests for the version option."""

    def test_version(self, runner: CliRunner) -> None:
        """Test --version prints the package version."""
        result = runner.invoke(cli_main.cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
