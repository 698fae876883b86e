"""
Tests for the install, update and uninstall flows.

The GitHub client is replaced with the in-memory FakeContentsClient from
conftest.py; the config file and project directory live in tmp_path.
"""

import json
from unittest.mock import patch

import pytest

from instruction_hub.domain.instruction import DEFAULT_FRONT_MATTER, ManagedInstruction
from instruction_hub.errors import LocalIOError, MalformedReferenceError, NotFoundError
from instruction_hub.exit_codes import GENERAL_ERROR, PARTIAL_SUCCESS, SUCCESS
from instruction_hub.infra.file_store import JsonDocumentStore
from instruction_hub.services.install_service import OperationResult


def drain(flow):
    """Run a flow to completion, returning (messages, result)."""
    messages = []
    while True:
        try:
            messages.append(next(flow))
        except StopIteration as stop:
            return messages, stop.value


def install_all(hub, repo_ref):
    return drain(hub.service.install(repo_ref, hub.service.list_files(repo_ref)))


class TestOperationResult:

    def test_counts_and_exit_codes(self):
        result = OperationResult()
        assert result.exit_code == SUCCESS

        result.record('installed', name='a')
        result.record('skipped', name='b')
        assert (result.succeeded, result.skipped, result.failed) == (1, 1, 0)
        assert result.success

        result.record('error', name='c', error='boom')
        assert result.errors == ['c: boom']
        assert result.exit_code == PARTIAL_SUCCESS

    def test_all_failed(self):
        result = OperationResult()
        result.record('error', name='a', error='x')
        assert not result.success
        assert result.exit_code == GENERAL_ERROR


class TestInstall:

    def test_installs_with_suffix_and_front_matter(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"guide.md": "# Guide\n"}

        messages, result = install_all(hub, "octo/docs")

        installed = instructions_dir / "guide.instructions.md"
        assert installed.read_text(encoding="utf-8") == DEFAULT_FRONT_MATTER + "# Guide\n"
        assert result.succeeded == 1
        assert messages[0] == "Installing 1 instruction(s)..."
        assert "Downloading guide.md..." in messages
        assert messages[-1] == "✓ Installed guide.instructions.md"

        entry = hub.tracker.get("guide.instructions.md")
        assert entry.source_repo == "octo/docs"
        assert entry.source_path == "guide.md"
        assert entry.installed_at == "2024-01-01T00:00:01.000Z"

    def test_existing_front_matter_kept(self, hub, fake_client, instructions_dir):
        content = '---\napplyTo: "**/*.py"\n---\n# Python\n'
        fake_client.repos["octo/docs"] = {"python.instructions.md": content}

        install_all(hub, "octo/docs")
        assert (instructions_dir / "python.instructions.md").read_text(encoding="utf-8") == content

    def test_nested_file_uses_basename(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"lang/go/go.md": "go"}

        install_all(hub, "octo/docs")
        assert (instructions_dir / "go.instructions.md").exists()
        assert hub.tracker.get("go.instructions.md").source_path == "lang/go/go.md"

    def test_manifest_written_next_to_files(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"guide.md": "x"}

        install_all(hub, "octo/docs")
        data = json.loads((instructions_dir / ".instruction-hub.json").read_text(encoding="utf-8"))
        assert data["instructions"][0]["sourceRepo"] == "octo/docs"

    def test_collision_with_other_repo_is_disambiguated(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/repoA"] = {"guide.md": "from A"}
        fake_client.repos["octo/repoB"] = {"guide.md": "from B"}

        install_all(hub, "octo/repoA")
        messages, result = install_all(hub, "octo/repoB")

        assert result.succeeded == 1
        assert "  File guide.md already exists from a different source." in messages
        assert "  Installing as guide.repoB.instructions.md to avoid conflict." in messages
        assert (instructions_dir / "guide.instructions.md").read_text(encoding="utf-8").endswith("from A")
        assert (instructions_dir / "guide.repoB.instructions.md").read_text(encoding="utf-8").endswith("from B")

        entries = hub.tracker.get_instructions()
        assert [(e.filename, e.source_repo) for e in entries] == [
            ("guide.instructions.md", "octo/repoA"),
            ("guide.repoB.instructions.md", "octo/repoB"),
        ]

    def test_same_source_overwrites(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"guide.md": "v1"}
        install_all(hub, "octo/docs")

        fake_client.repos["octo/docs"]["guide.md"] = "v2"
        messages, _ = install_all(hub, "octo/docs")

        assert "  File guide.instructions.md already exists. Overwriting..." in messages
        assert (instructions_dir / "guide.instructions.md").read_text(encoding="utf-8").endswith("v2")
        entries = hub.tracker.get_instructions()
        assert len(entries) == 1
        assert entries[0].installed_at == "2024-01-01T00:00:02.000Z"

    def test_untracked_file_is_overwritten_and_adopted(self, hub, fake_client, instructions_dir):
        instructions_dir.mkdir(parents=True)
        (instructions_dir / "guide.instructions.md").write_text("hand written", encoding="utf-8")
        fake_client.repos["octo/docs"] = {"guide.md": "managed"}

        messages, _ = install_all(hub, "octo/docs")

        assert "  File guide.instructions.md already exists. Overwriting..." in messages
        assert hub.tracker.is_managed("guide.instructions.md")

    def test_per_file_failure_continues(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"a.md": "A", "b.md": "B"}
        fake_client.failing_downloads.add("fake://octo/docs/a.md")

        messages, result = install_all(hub, "octo/docs")

        assert (result.succeeded, result.failed) == (1, 1)
        assert result.exit_code == PARTIAL_SUCCESS
        assert any(m.startswith("✗ Failed to install a.md:") for m in messages)
        assert (instructions_dir / "b.instructions.md").exists()
        assert not (instructions_dir / "a.instructions.md").exists()
        assert [e.filename for e in hub.tracker.get_instructions()] == ["b.instructions.md"]

    def test_empty_selection(self, hub):
        messages, result = drain(hub.service.install("octo/docs", []))
        assert messages == ["No files selected."]
        assert result.succeeded == 0
        assert hub.service.last_result is result

    def test_token_passed_to_downloads(self, hub, fake_client):
        fake_client.token = "tok"
        fake_client.repos["octo/docs"] = {"a.md": "A"}

        install_all(hub, "octo/docs")
        assert fake_client.download_calls == [("fake://octo/docs/a.md", "tok")]

    def test_list_files_honors_subpath(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"guides/a.md": "A", "other/b.md": "B", "guides/c.txt": "C"}

        files = hub.service.list_files("octo/docs/guides")
        assert [f.path for f in files] == ["guides/a.md"]


class TestInstallFromUrl:

    URL = "https://github.com/octo/docs/blob/main/guides/python.md"

    def test_installs_and_adds_repo(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"guides/python.md": "# Py\n"}

        messages, result = drain(hub.service.install_from_url(self.URL))

        assert result.succeeded == 1
        assert messages[0] == "Added repository octo/docs to configuration."
        assert "Fetching guides/python.md..." in messages
        assert messages[-1] == "✓ Installed python.instructions.md"
        assert hub.config_store.get_repos() == ["octo/docs"]

        entry = hub.tracker.get("python.instructions.md")
        assert (entry.source_repo, entry.source_path) == ("octo/docs", "guides/python.md")
        assert (instructions_dir / "python.instructions.md").read_text(encoding="utf-8").startswith(
            DEFAULT_FRONT_MATTER
        )

    def test_repo_already_configured(self, hub, fake_client):
        hub.config_store.add_repo("octo/docs")
        fake_client.repos["octo/docs"] = {"guides/python.md": "x"}

        messages, _ = drain(hub.service.install_from_url(self.URL))

        assert not any(m.startswith("Added repository") for m in messages)
        assert hub.config_store.get_repos() == ["octo/docs"]

    def test_malformed_url(self, hub):
        with pytest.raises(MalformedReferenceError):
            drain(hub.service.install_from_url("https://github.com/octo/docs"))
        assert hub.config_store.get_repos() == []

    def test_missing_file_raises(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {}

        with pytest.raises(NotFoundError):
            drain(hub.service.install_from_url(self.URL))
        assert hub.tracker.get_instructions() == []

    def test_installed_file_can_be_updated(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"guides/python.md": "v1"}
        drain(hub.service.install_from_url(self.URL))

        fake_client.repos["octo/docs"]["guides/python.md"] = "v2"
        _, result = drain(hub.service.update())

        assert result.succeeded == 1
        assert (instructions_dir / "python.instructions.md").read_text(encoding="utf-8").endswith("v2")


    def test_encoded_url_can_be_updated(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"docs/my guide.md": "v1"}
        _, result = drain(hub.service.install_from_url("https://github.com/octo/docs/blob/main/docs/my%20guide.md"))

        assert result.succeeded == 1
        assert hub.tracker.get("my guide.instructions.md").source_path == "docs/my guide.md"

        fake_client.repos["octo/docs"]["docs/my guide.md"] = "v2"
        messages, result = drain(hub.service.update())

        assert (result.succeeded, result.failed) == (1, 0)
        assert "✓ Updated my guide.instructions.md" in messages
        assert (instructions_dir / "my guide.instructions.md").read_text(encoding="utf-8").endswith("v2")

    def test_unwritable_manifest_raises_local_io_error(self, hub, fake_client, instructions_dir):
        (instructions_dir / ".instruction-hub.json").mkdir(parents=True)
        fake_client.repos["octo/docs"] = {"guides/python.md": "x"}

        with pytest.raises(LocalIOError):
            drain(hub.service.install_from_url(self.URL))


class TestUpdate:

    def test_nothing_tracked(self, hub):
        messages, result = drain(hub.service.update())
        assert messages == ["No managed instructions found to update."]
        assert result.succeeded == result.failed == result.skipped == 0

    def test_unchanged_is_idempotent(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"guide.md": "# Guide\n"}
        install_all(hub, "octo/docs")
        before = hub.tracker.manifest_path.read_text(encoding="utf-8")

        messages, result = drain(hub.service.update())

        assert result.skipped == 1
        assert result.succeeded == 0
        assert "  guide.instructions.md is already up to date" in messages
        assert hub.tracker.manifest_path.read_text(encoding="utf-8") == before

    def test_changed_content_rewritten_with_new_timestamp(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"a.md": "A1", "b.md": "B1"}
        install_all(hub, "octo/docs")

        fake_client.repos["octo/docs"]["a.md"] = "A2"
        messages, result = drain(hub.service.update())

        assert (result.succeeded, result.skipped) == (1, 1)
        assert "✓ Updated a.instructions.md" in messages
        assert (instructions_dir / "a.instructions.md").read_text(encoding="utf-8") == DEFAULT_FRONT_MATTER + "A2"

        entries = hub.tracker.get_instructions()
        assert [e.filename for e in entries] == ["b.instructions.md", "a.instructions.md"]
        assert entries[-1].installed_at == "2024-01-01T00:00:03.000Z"

    def test_missing_local_file_is_restored(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"a.md": "A"}
        install_all(hub, "octo/docs")
        (instructions_dir / "a.instructions.md").unlink()

        _, result = drain(hub.service.update())

        assert result.succeeded == 1
        assert (instructions_dir / "a.instructions.md").exists()

    def test_source_path_gone(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"a.md": "A", "b.md": "B"}
        install_all(hub, "octo/docs")
        del fake_client.repos["octo/docs"]["a.md"]
        fake_client.repos["octo/docs"]["b.md"] = "B2"

        messages, result = drain(hub.service.update())

        assert (result.succeeded, result.failed) == (1, 1)
        assert "✗ Failed to update a.instructions.md: Source file not found: a.md" in messages
        assert hub.tracker.is_managed("a.instructions.md")

    def test_listing_cached_per_repo(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"a.md": "A", "b.md": "B", "c.md": "C"}
        install_all(hub, "octo/docs")
        fake_client.list_calls.clear()

        drain(hub.service.update())
        assert len(fake_client.list_calls) == 1

    def test_repository_error_fails_each_entry(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"a.md": "A", "b.md": "B"}
        install_all(hub, "octo/docs")
        del fake_client.repos["octo/docs"]

        _, result = drain(hub.service.update())
        assert (result.succeeded, result.failed) == (0, 2)
        assert result.exit_code == GENERAL_ERROR

    def test_manifest_write_failure_during_update(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"a.md": "A"}
        install_all(hub, "octo/docs")
        fake_client.repos["octo/docs"]["a.md"] = "A2"

        with patch.object(JsonDocumentStore, "_write_atomic", side_effect=PermissionError("read-only")):
            _, result = drain(hub.service.update())

        assert result.failed == 1


class TestUninstall:

    def test_removes_file_and_entry(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"a.md": "A", "b.md": "B"}
        install_all(hub, "octo/docs")

        target = hub.tracker.get("a.instructions.md")
        messages, result = drain(hub.service.uninstall([target]))

        assert messages == ["✓ Uninstalled a.instructions.md"]
        assert result.succeeded == 1
        assert not (instructions_dir / "a.instructions.md").exists()
        assert (instructions_dir / "b.instructions.md").exists()
        assert [e.filename for e in hub.tracker.get_instructions()] == ["b.instructions.md"]

    def test_missing_file_still_untracked(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"a.md": "A"}
        install_all(hub, "octo/docs")
        (instructions_dir / "a.instructions.md").unlink()

        _, result = drain(hub.service.uninstall(hub.tracker.get_instructions()))

        assert result.succeeded == 1
        assert hub.tracker.get_instructions() == []

    def test_untracked_files_are_left_alone(self, hub, fake_client, instructions_dir):
        fake_client.repos["octo/docs"] = {"a.md": "A"}
        install_all(hub, "octo/docs")
        (instructions_dir / "mine.instructions.md").write_text("keep", encoding="utf-8")

        drain(hub.service.uninstall(hub.tracker.get_instructions()))
        assert (instructions_dir / "mine.instructions.md").exists()

    def test_empty_selection(self, hub):
        messages, _ = drain(hub.service.uninstall([]))
        assert messages == ["No instructions selected."]

    def test_manifest_write_failure_is_reported(self, hub, fake_client):
        fake_client.repos["octo/docs"] = {"a.md": "A", "b.md": "B"}
        install_all(hub, "octo/docs")
        entries = hub.tracker.get_instructions()

        with patch.object(JsonDocumentStore, "_write_atomic", side_effect=PermissionError("read-only")):
            messages, result = drain(hub.service.uninstall(entries))

        assert (result.succeeded, result.failed) == (0, 2)
        assert any(m.startswith("✗ Failed to uninstall a.instructions.md: Could not write") for m in messages)
        assert len(hub.tracker.get_instructions()) == 2

    def test_unknown_entry(self, hub):
        stray = ManagedInstruction("ghost.instructions.md", "octo/docs", "ghost.md", "t")
        _, result = drain(hub.service.uninstall([stray]))
        assert result.succeeded == 1
