"""
Operator command line (click).
"""

import pytest
from click.testing import CliRunner

from showroom.cli import cli

FAST_HASH_ENV = {
    "SHOWROOM_HASH_TIME_COST": "1",
    "SHOWROOM_HASH_MEMORY_COST": "8",
    "SHOWROOM_HASH_PARALLELISM": "1",
}


@pytest.fixture
def invoke(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    database_url = f"sqlite:///{tmp_path / 'showroom.sqlite3'}"
    runner = CliRunner()

    def run(*args, **kwargs):
        return runner.invoke(cli, ["--database-url", database_url, *args], env=FAST_HASH_ENV, **kwargs)

    return run


class TestCLI:

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "showroom" in result.output

    def test_init_db(self, invoke):
        result = invoke("init-db")
        assert result.exit_code == 0
        assert "Schema ready" in result.output
        assert "products" in result.output

    def test_create_role(self, invoke):
        result = invoke("create-role", "1", "admin", "--endpoint", "/user", "--endpoint", "/product")
        assert result.exit_code == 0
        assert "Created role 'admin'" in result.output

        duplicate = invoke("create-role", "3", "admin")
        assert duplicate.exit_code == 1
        assert "Role already exists (409)" in duplicate.output

    def test_create_user(self, invoke):
        assert invoke("create-role", "2", "staff").exit_code == 0

        result = invoke("create-user", "alice", "--password", "pw")
        assert result.exit_code == 0
        assert "Created user 'alice'" in result.output

        duplicate = invoke("create-user", "ALICE", "--password", "pw")
        assert duplicate.exit_code == 1
        assert "User already exists" in duplicate.output

    def test_create_user_prompts_for_password(self, invoke):
        assert invoke("create-role", "2", "staff").exit_code == 0
        result = invoke("create-user", "bob", input="pw\npw\n")
        assert result.exit_code == 0
        assert "Created user 'bob'" in result.output

    def test_create_user_without_roles(self, invoke):
        result = invoke("create-user", "carol", "--password", "pw", "--role", "ghost")
        assert result.exit_code == 1
        assert "Role does not exist (409)" in result.output

    def test_routes(self, invoke):
        result = invoke("routes")
        assert result.exit_code == 0
        assert "/auth/login" in result.output
        assert "ProductController.create" in result.output

    def test_invalid_configuration(self, invoke):
        result = CliRunner().invoke(cli, ["routes"], env={"SHOWROOM_PORT": "eighty"})
        assert result.exit_code == 2
        assert "Invalid configuration" in result.output
