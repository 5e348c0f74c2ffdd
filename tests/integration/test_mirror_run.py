"""Integration tests for complete mirror runs.

This module runs MirrorCommand end to end against real git. Tests verify:
- Every listing page is walked and every page lands in one commit
- The commit is pushed to origin/main
- Re-running against an unchanged wiki is a no-op
- A failure anywhere in the walk leaves the repository without a commit

Requirements:
- git on PATH
- No external API calls (in-memory wiki)
"""

import subprocess
from unittest.mock import ANY, MagicMock, patch

import pytest

from src.cli.mirror_command import MirrorCommand
from src.cli.models import ExitCode, MirrorConfig
from src.cli.output import OutputHandler
from src.wiki_client.errors import APIUnreachableError
from tests.fixtures.git_test_repos import commit_count
from tests.fixtures.sample_listings import (
    BASE_URL,
    make_content_payload,
    make_listing_payload,
    make_result,
)
from tests.fixtures.sample_pages import (
    SAMPLE_EXPORT_VIEW,
    SAMPLE_EXPORT_VIEW_WITH_SCRIPTS,
    SAMPLE_EXPORT_VIEW_WITH_TABLE,
)
from tests.helpers.fake_wiki import FakeWikiAPI

FIRST = "/rest/api/content?limit=2"
SECOND = "/rest/api/content?limit=2&start=2"


def _wiki_payloads():
    """Three pages over two listing pages."""
    results = [
        make_result("1", title="Home"),
        make_result("2", title="Security"),
        make_result("3", title="Tables"),
    ]
    listings = {
        BASE_URL + FIRST: make_listing_payload(results[:2], next_path=SECOND, limit=2),
        BASE_URL + SECOND: make_listing_payload(results[2:], start=2, limit=2),
    }
    pages = {
        results[0]["_links"]["self"]: SAMPLE_EXPORT_VIEW,
        results[1]["_links"]["self"]: SAMPLE_EXPORT_VIEW_WITH_SCRIPTS,
        results[2]["_links"]["self"]: SAMPLE_EXPORT_VIEW_WITH_TABLE,
    }
    return listings, pages


def _config(work_path, **kwargs) -> MirrorConfig:
    return MirrorConfig(base_url=BASE_URL, output_dir=str(work_path), page_size=2, **kwargs)


def _run(work_path, api, commit=True, push=True, **config_kwargs) -> ExitCode:
    command = MirrorCommand(
        _config(work_path, **config_kwargs),
        output_handler=OutputHandler(no_color=True),
        api=api,
    )
    return command.run(commit=commit, push=push)


def _log_subjects(repo_path, ref="HEAD"):
    result = subprocess.run(
        ["git", "log", "--format=%s", ref],
        cwd=repo_path,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.splitlines()


def _page(work_path, title):
    return work_path / "wiki.example.org" / "display" / "TEST" / f"{title}.html"


@pytest.mark.integration
class TestMirrorRun:
    """End-to-end mirror runs against a local bare remote."""

    def test_full_run_publishes_one_commit(self, mirror_repos):
        work_path, remote_path = mirror_repos
        api = FakeWikiAPI(*_wiki_payloads())

        assert _run(work_path, api) == ExitCode.SUCCESS

        assert api.listing_requests == [BASE_URL + FIRST, BASE_URL + SECOND]
        assert commit_count(work_path) == 1
        assert commit_count(remote_path, "main") == 1
        assert _log_subjects(remote_path, "main")[0].startswith("wiki dump on ")
        for title in ("Home", "Security", "Tables"):
            assert _page(work_path, title).exists()

    def test_written_content_is_sanitized(self, mirror_repos):
        work_path, _ = mirror_repos

        _run(work_path, FakeWikiAPI(*_wiki_payloads()))

        security = _page(work_path, "Security").read_text(encoding="utf-8")
        assert "<script" not in security
        assert "onclick" not in security
        assert "javascript:" not in security
        assert '<a href="/display/TEST/Other">good link</a>' in security

    def test_rerun_is_noop(self, mirror_repos):
        work_path, remote_path = mirror_repos

        assert _run(work_path, FakeWikiAPI(*_wiki_payloads())) == ExitCode.SUCCESS
        first = {t: _page(work_path, t).read_bytes() for t in ("Home", "Security", "Tables")}

        assert _run(work_path, FakeWikiAPI(*_wiki_payloads())) == ExitCode.SUCCESS

        assert commit_count(remote_path, "main") == 1
        for title, content in first.items():
            assert _page(work_path, title).read_bytes() == content

    def test_rerun_can_fail_on_empty_commit(self, mirror_repos):
        work_path, _ = mirror_repos

        _run(work_path, FakeWikiAPI(*_wiki_payloads()))
        exit_code = _run(work_path, FakeWikiAPI(*_wiki_payloads()), fail_on_empty_commit=True)

        assert exit_code == ExitCode.GIT_ERROR

    def test_changed_page_adds_commit(self, mirror_repos):
        work_path, remote_path = mirror_repos
        listings, pages = _wiki_payloads()

        _run(work_path, FakeWikiAPI(listings, pages))
        pages[f"{BASE_URL}/rest/api/content/1"] = "<p>Edited home</p>"
        _run(work_path, FakeWikiAPI(listings, pages))

        assert commit_count(remote_path, "main") == 2
        assert _page(work_path, "Home").read_text(encoding="utf-8") == "<p>Edited home</p>\n"

    def test_failure_leaves_no_commit(self, mirror_repos):
        work_path, remote_path = mirror_repos
        listings, pages = _wiki_payloads()
        failing = f"{BASE_URL}/rest/api/content/3"
        api = FakeWikiAPI(listings, pages, failures={failing: APIUnreachableError(failing)})

        assert _run(work_path, api) == ExitCode.NETWORK_ERROR

        assert commit_count(work_path) == 0
        assert commit_count(remote_path, "main") == 0

    def test_missing_listing_leaves_no_commit(self, mirror_repos):
        work_path, _ = mirror_repos
        listings, pages = _wiki_payloads()
        del listings[BASE_URL + SECOND]

        assert _run(work_path, FakeWikiAPI(listings, pages)) == ExitCode.NETWORK_ERROR
        assert commit_count(work_path) == 0

    def test_no_push_commits_locally(self, mirror_repos):
        work_path, remote_path = mirror_repos

        assert _run(work_path, FakeWikiAPI(*_wiki_payloads()), push=False) == ExitCode.SUCCESS

        assert commit_count(work_path) == 1
        assert commit_count(remote_path, "main") == 0

    def test_no_commit_writes_only(self, mirror_repos):
        work_path, _ = mirror_repos

        assert _run(work_path, FakeWikiAPI(*_wiki_payloads()), commit=False) == ExitCode.SUCCESS

        assert commit_count(work_path) == 0
        assert _page(work_path, "Home").exists()

    def test_output_dir_must_be_repository(self, tmp_path):
        api = FakeWikiAPI(*_wiki_payloads())

        assert _run(tmp_path, api) == ExitCode.GIT_ERROR
        assert api.listing_requests == []


@pytest.mark.integration
class TestMirrorRunWithAPIWrapper:
    """Runs the real APIWrapper over a patched atlassian client."""

    @patch('src.wiki_client.api_wrapper.Confluence')
    def test_run_through_api_wrapper(self, mock_confluence, mirror_repos):
        work_path, remote_path = mirror_repos
        listings, pages = _wiki_payloads()
        requests_seen = []

        def fake_get(url, params=None, absolute=False):
            requests_seen.append((url, params))
            if url in listings:
                return listings[url]
            return make_content_payload(pages[url])

        mock_client = MagicMock()
        mock_client.get.side_effect = fake_get
        mock_confluence.return_value = mock_client

        command = MirrorCommand(_config(work_path), output_handler=OutputHandler(no_color=True))

        assert command.run() == ExitCode.SUCCESS

        mock_confluence.assert_called_once_with(url=BASE_URL, timeout=30, session=ANY)
        content_params = [params for url, params in requests_seen if url not in listings]
        assert content_params == [{"expand": "body.export_view"}] * 3
        assert commit_count(remote_path, "main") == 1
