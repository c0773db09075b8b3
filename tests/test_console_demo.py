"""Tests for the offline console demo."""

import pytest

from console_demo import ConsoleSession


class TestScenarios:
    def test_checkout_scenario_ends_at_checkout(self, capsys):
        session = ConsoleSession()
        session.run_scenario("checkout")
        out = capsys.readouterr().out
        assert session.state == "checkout"
        assert "tag=tc_kumite_core" in out
        assert "prescribe" in session.trace

    def test_freebie_scenario_ends(self, capsys):
        session = ConsoleSession()
        session.run_scenario("freebie")
        assert session.trace == ["consent", "freebie", "freebie_email", "freebie_email", "end"]
        assert session.data == {"email": "fan@example.com"}

    def test_recovery_scenario_restarts(self, capsys):
        session = ConsoleSession()
        session.run_scenario("recovery")
        assert session.state == "consent"
        assert session.trace == ["consent"]
        assert session.data == {}

    def test_unknown_scenario(self, capsys):
        ConsoleSession().run_scenario("nope")
        assert "Unknown scenario" in capsys.readouterr().out

    @pytest.mark.parametrize("scenario", sorted(ConsoleSession.SCENARIOS))
    def test_all_scenarios_run(self, scenario, capsys):
        ConsoleSession().run_scenario(scenario)
        assert "complete" in capsys.readouterr().out


class TestInteractive:
    def test_quit(self, monkeypatch, capsys):
        inputs = iter(["Yes", "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
        session = ConsoleSession()
        session.run()
        assert session.state == "goal"
        assert "Session ended" in capsys.readouterr().out

    def test_runs_to_terminal_state(self, monkeypatch, capsys):
        inputs = iter(["Not now", "yes", "fan@example.com"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
        session = ConsoleSession()
        session.run()
        assert session.state == "end"
        assert "Conversation complete" in capsys.readouterr().out

    def test_long_input_is_refused(self, monkeypatch, capsys):
        inputs = iter(["x" * 600, "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
        session = ConsoleSession()
        session.run()
        assert session.state == "consent"
