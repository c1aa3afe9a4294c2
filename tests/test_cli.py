"""
Tests for the Filer command-line interface.
"""

import json
import sys
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from filer import filer


@pytest.fixture
def env(tmp_path):
    """Config file pointing all roots and the audit log into tmp_path."""
    roots = {}
    for name in ("documents", "resources", "library", "temporary"):
        path = tmp_path / name
        path.mkdir()
        roots[name] = str(path)

    config_path = tmp_path / "config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump({"filer": {
            "audit_log": str(tmp_path / "audit.jsonl"),
            "roots": roots,
        }}, f)

    return {"config": str(config_path), "tmp": tmp_path, "roots": roots}


def invoke(env, *args):
    runner = CliRunner()
    return runner.invoke(filer, ["--config", env["config"], *args])


class TestCli:
    """Test CLI commands end to end."""

    def test_mkdir_and_exists(self, env):
        target = env["tmp"] / "new"

        result = invoke(env, "mkdir", str(target))
        assert result.exit_code == 0
        assert target.is_dir()

        result = invoke(env, "exists", str(target))
        assert result.exit_code == 0
        assert "directory" in result.output

    def test_mkdir_existing_fails(self, env):
        target = env["tmp"] / "new"
        target.mkdir()

        result = invoke(env, "mkdir", str(target))

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_exists_missing(self, env):
        result = invoke(env, "exists", str(env["tmp"] / "missing"))

        assert result.exit_code == 1
        assert "absent" in result.output

    def test_copy_file(self, env):
        src = env["tmp"] / "a.txt"
        src.write_text("hello")

        result = invoke(env, "cp", str(src), str(env["tmp"] / "out"))

        assert result.exit_code == 0
        assert (env["tmp"] / "out" / "a.txt").read_text() == "hello"

    def test_rm_dir_strict_and_permissive(self, env):
        target = env["tmp"] / "file.txt"
        target.write_text("x")

        result = invoke(env, "rm-dir", str(target))
        assert result.exit_code == 1
        assert target.exists()

        result = invoke(env, "rm-dir", "--permissive", str(target))
        assert result.exit_code == 0
        assert not target.exists()

    def test_rename_dir(self, env):
        src = env["tmp"] / "old"
        src.mkdir()
        (src / "f.txt").write_text("f")

        result = invoke(env, "rename-dir", str(src), "renamed")

        assert result.exit_code == 0
        assert (env["tmp"] / "renamed" / "f.txt").exists()

    def test_find(self, env):
        expected = Path(env["roots"]["library"]) / "x.cfg"
        expected.write_text("cfg")

        result = invoke(env, "find", "x.cfg")

        assert result.exit_code == 0
        assert result.output.strip() == str(expected)

    def test_find_missing(self, env):
        result = invoke(env, "find", "nothing.cfg")

        assert result.exit_code == 1

    def test_find_rm_missing(self, env):
        result = invoke(env, "find-rm", "nothing.cfg")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_count_and_cat(self, env):
        folder = Path(env["roots"]["documents"])
        (folder / "one.txt").write_text("one")
        (folder / "two.txt").write_text("two")

        result = invoke(env, "count", str(folder))
        assert result.output.strip() == "2"

        result = invoke(env, "cat", str(folder / "one.txt"))
        assert result.exit_code == 0
        assert result.output == "one"

    def test_audit_shows_failures(self, env):
        invoke(env, "rm", str(env["tmp"] / "missing.txt"))

        result = invoke(env, "audit", "--failed")

        assert result.exit_code == 0
        assert "Recent Audit Log" in result.output

        with open(env["tmp"] / "audit.jsonl", encoding="utf-8") as f:
            entries = [json.loads(line) for line in f if line.strip()]
        assert entries[-1]["action_type"] == "delete"
        assert entries[-1]["status"] == "failed"

    def test_roots(self, env):
        result = invoke(env, "roots")

        assert result.exit_code == 0
        assert "documents" in result.output
        assert "temporary" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
