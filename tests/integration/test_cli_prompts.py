"""Integration tests for prompt and favorites CLI commands"""

import json
import logging

import pytest
from typer.testing import CliRunner

from promptcraft.core.prompts import PromptRenderer
from promptcraft.main import app
from promptcraft.models.prompts import PromptVariable, VariableType


@pytest.fixture
def library(temp_dir, prompts_dir, state_path, monkeypatch):
    """Point the CLI at the sample library and a private state file"""
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("HOME", str(temp_dir / "home"))
    monkeypatch.setenv("PROMPTCRAFT_PROMPTS_DIR", str(prompts_dir))
    monkeypatch.setenv("PROMPTCRAFT_STATE_PATH", str(state_path))
    return prompts_dir


class TestPromptsCLI:
    """Test prompt library commands"""

    def setup_method(self):
        """Set up test runner"""
        self.runner = CliRunner()

    def test_list(self, library):
        result = self.runner.invoke(app, ["prompts", "list"])

        assert result.exit_code == 0
        assert "email" in result.stdout
        assert "journal" in result.stdout

    def test_list_by_category(self, library):
        result = self.runner.invoke(app, ["prompts", "list", "--category", "personal"])

        assert result.exit_code == 0
        assert "journal" in result.stdout
        assert "code-review" not in result.stdout

    def test_list_empty_library(self, library, temp_dir, monkeypatch):
        monkeypatch.setenv("PROMPTCRAFT_PROMPTS_DIR", str(temp_dir / "empty"))

        result = self.runner.invoke(app, ["prompts", "list"])

        assert result.exit_code == 0
        assert "No prompts found" in result.stdout

    def test_search(self, library):
        result = self.runner.invoke(app, ["prompts", "search", "writing"])

        assert result.exit_code == 0
        assert "meeting-notes" in result.stdout
        assert "journal" not in result.stdout

    def test_search_with_filters(self, library):
        result = self.runner.invoke(
            app, ["prompts", "search", "--tag", "writing", "--category", "work"]
        )

        assert result.exit_code == 0
        assert "email" in result.stdout
        assert "meeting-notes" not in result.stdout

    def test_search_no_match(self, library):
        result = self.runner.invoke(app, ["prompts", "search", "haiku"])

        assert result.exit_code == 0
        assert "No prompts match: haiku" in result.stdout

    def test_show(self, library):
        result = self.runner.invoke(app, ["prompts", "show", "code-review"])

        assert result.exit_code == 0
        assert "Code Review Assistant" in result.stdout
        assert "Review {{lang}} code: {{code}}" in result.stdout

    def test_show_unknown(self, library):
        result = self.runner.invoke(app, ["prompts", "show", "nope"])

        assert result.exit_code == 1
        assert "Prompt with ID nope not found" in result.stdout

    def test_render(self, library, state_path):
        result = self.runner.invoke(
            app, ["prompts", "render", "code-review", "--var", "lang=Go"]
        )

        assert result.exit_code == 0
        assert "Review Go code: // empty" in result.stdout
        assert "Defaults used: code" in result.stdout

        state = json.loads(state_path.read_text())
        assert state["recents"][0]["promptId"] == "code-review"

    def test_render_reports_missing_values(self, library):
        result = self.runner.invoke(
            app, ["prompts", "render", "email", "--var", "topic=budget"]
        )

        assert result.exit_code == 0
        assert "Write an email to  about budget" in result.stdout
        assert "Variable 'recipient' is required but not provided" in result.stdout

    def test_render_bad_variable_syntax(self, library):
        result = self.runner.invoke(app, ["prompts", "render", "email", "--var", "oops"])
        assert result.exit_code == 2

    def test_render_unknown(self, library):
        result = self.runner.invoke(app, ["prompts", "render", "nope"])

        assert result.exit_code == 1
        assert "Prompt with ID nope not found" in result.stdout

    def test_validate_consistent(self, library):
        result = self.runner.invoke(app, ["prompts", "validate", "code-review"])

        assert result.exit_code == 0
        assert "Placeholders and variables are consistent" in result.stdout

    def test_validate_inconsistent(self, library, prompt_factory):
        prompt = prompt_factory(id="broken", name="Broken", content="{{a}} {{b}}")
        (library / "work" / "broken.json").write_text(json.dumps(prompt.to_json()))

        result = self.runner.invoke(app, ["prompts", "validate", "broken"])

        assert result.exit_code == 1
        assert "found in content but no variable" in result.stdout
        assert "is declared but not used" in result.stdout

    def test_render_converts_declared_types(self, library, prompt_factory, monkeypatch):
        prompt = prompt_factory(
            id="tagger",
            name="Tagger",
            content="Tags: {{tags}} x{{count}} {{flag}}",
            variables=[
                PromptVariable(name="tags", type=VariableType.ARRAY),
                PromptVariable(name="count", type=VariableType.NUMBER),
                PromptVariable(name="flag", type=VariableType.BOOLEAN),
            ],
        )
        (library / "work" / "tagger.json").write_text(json.dumps(prompt.to_json()))

        received = {}
        render = PromptRenderer.render

        def recording_render(self, prompt, values=None):
            received.update(values)
            return render(self, prompt, values)

        monkeypatch.setattr(PromptRenderer, "render", recording_render)

        result = self.runner.invoke(
            app,
            [
                "prompts", "render", "tagger",
                "--var", "tags=a,b", "--var", "count=3", "--var", "flag=true",
            ],
        )

        assert result.exit_code == 0
        assert received == {"tags": ["a", "b"], "count": 3, "flag": True}
        assert "Tags: a,b x3 true" in result.stdout

    def test_validate_all_consistent(self, library):
        result = self.runner.invoke(app, ["prompts", "validate"])

        assert result.exit_code == 0
        assert "Validating 4 prompt(s)" in result.stdout
        assert "All prompts are consistent" in result.stdout

    def test_validate_all_reports_totals(self, library, prompt_factory):
        prompt = prompt_factory(id="broken", name="Broken", content="{{a}} {{b}}")
        (library / "work" / "broken.json").write_text(json.dumps(prompt.to_json()))

        result = self.runner.invoke(app, ["prompts", "validate"])

        assert result.exit_code == 1
        assert "Broken (broken)" in result.stdout
        assert "Summary: 1/5 prompts have issues" in result.stdout
        assert "Total errors: 2, warnings: 1" in result.stdout

    def test_recent(self, library, state_path):
        result = self.runner.invoke(app, ["prompts", "recent"])
        assert "No recent prompts" in result.stdout

        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(
            json.dumps(
                {
                    "favorites": [],
                    "recents": [
                        {"promptId": "code-review", "usedAt": "2025-01-15T12:00:00Z"},
                        {"promptId": "gone", "usedAt": "2025-01-14T12:00:00Z"},
                    ],
                }
            )
        )

        result = self.runner.invoke(app, ["prompts", "recent"])

        assert result.exit_code == 0
        assert "Code Review Assistant" in result.stdout
        assert "gone" in result.stdout
        assert "(prompt not found)" in result.stdout
        assert result.stdout.index("code-review") < result.stdout.index("gone")

    def test_recents_alias(self, library):
        self.runner.invoke(app, ["prompts", "render", "email", "--var", "topic=x"])

        result = self.runner.invoke(app, ["prompts", "recents"])

        assert result.exit_code == 0
        assert "Professional Email" in result.stdout

    def test_categories(self, library):
        result = self.runner.invoke(app, ["prompts", "categories"])

        assert result.exit_code == 0
        for label in ("work", "personal", "shared", "total"):
            assert label in result.stdout
        assert "4" in result.stdout

    def test_tools(self, library):
        result = self.runner.invoke(app, ["prompts", "tools"])

        assert result.exit_code == 0
        assert "prompt_email" in result.stdout
        assert "search_prompts" in result.stdout

    def test_log_file_option(self, library, temp_dir):
        log_file = temp_dir / "logs" / "cli.log"
        logger = logging.getLogger("promptcraft")
        handlers, level = list(logger.handlers), logger.level

        try:
            result = self.runner.invoke(
                app, ["--log-file", str(log_file), "-v", "prompts", "list"]
            )
            for handler in logger.handlers:
                handler.flush()

            assert result.exit_code == 0
            assert "Loaded 4 prompt(s)" in log_file.read_text()
        finally:
            for handler in logger.handlers:
                if handler not in handlers:
                    handler.close()
            logger.handlers = handlers
            logger.setLevel(level)

    def test_prompts_help(self):
        result = self.runner.invoke(app, ["prompts", "--help"])

        assert result.exit_code == 0
        assert "render" in result.stdout
        assert "search" in result.stdout


class TestFavoritesCLI:
    """Test favorite prompt commands"""

    def setup_method(self):
        """Set up test runner"""
        self.runner = CliRunner()

    def test_favorites_flow(self, library):
        result = self.runner.invoke(app, ["favorites", "list"])
        assert "No favorite prompts" in result.stdout

        result = self.runner.invoke(app, ["favorites", "add", "email"])
        assert result.exit_code == 0
        assert "Added email to favorites" in result.stdout

        result = self.runner.invoke(app, ["favorites", "add", "email"])
        assert "email is already in favorites" in result.stdout

        result = self.runner.invoke(app, ["favorites", "list"])
        assert result.exit_code == 0
        assert "email" in result.stdout
        assert "journal" not in result.stdout

        result = self.runner.invoke(app, ["favorites", "remove", "email"])
        assert "Removed email from favorites" in result.stdout

        result = self.runner.invoke(app, ["favorites", "remove", "email"])
        assert "email is not in favorites" in result.stdout

    def test_favorite_changes_search_order(self, library):
        self.runner.invoke(app, ["favorites", "add", "email"])

        result = self.runner.invoke(app, ["prompts", "search", "writing"])

        assert result.exit_code == 0
        assert result.stdout.index("email") < result.stdout.index("meeting-notes")

    def test_add_unknown(self, library):
        result = self.runner.invoke(app, ["favorites", "add", "nope"])

        assert result.exit_code == 1
        assert "Prompt with ID nope not found" in result.stdout
