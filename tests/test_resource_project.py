"""deploy_project 어댑터 테스트 (httpx mock으로 호출 횟수 검증)."""

from __future__ import annotations

from typing import Any

import orjson
import pytest
from pytest_httpx import HTTPXMock

from deploy_provider.client import DeployApiError, DeployClient
from deploy_provider.resources import ProjectResource

API = "https://dash.deno.com/api"
SOURCE = "https://dash.deno.com/examples/hello.js"
LINK = {
    "organization": "wperron",
    "repo": "terraform-deploy-provider",
    "entrypoint": "/deploy/testdata/main.ts",
}


@pytest.fixture()
def resource(client: DeployClient) -> ProjectResource:
    return ProjectResource(client)


def _calls(httpx_mock: HTTPXMock) -> list[tuple[str, str]]:
    return [(r.method, r.url.path) for r in httpx_mock.get_requests()]


class TestCreate:
    """create 테스트."""

    def test_create_without_source(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, sample_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects", method="POST", json=sample_project)
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", json=sample_project)

        identity, state = resource.create({"name": "demo"})

        assert identity == "proj-1"
        assert state["project_id"] == "proj-1"
        assert state["name"] == "demo"
        assert state["env_vars"] == {}
        assert state["has_production_deployment"] is False
        assert state["production_deployment"] is None
        assert state["github_link"] is None
        assert _calls(httpx_mock) == [
            ("POST", "/api/projects"),
            ("GET", "/api/projects/proj-1"),
        ]

    def test_create_with_env_vars_then_read_is_stable(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, sample_project: dict,
    ) -> None:
        project = {**sample_project, "envVars": {"foo": "bar", "fruit": "banana"}}
        httpx_mock.add_response(url=f"{API}/projects", method="POST", json=project)
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", json=project)
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", json=project)

        identity, state = resource.create(
            {"name": "demo", "env_vars": {"foo": "bar", "fruit": "banana"}},
        )
        again = resource.read(identity, state)

        sent = orjson.loads(httpx_mock.get_requests()[0].content)
        assert sent == {"name": "demo", "envVars": {"foo": "bar", "fruit": "banana"}}
        assert state["env_vars"] == {"foo": "bar", "fruit": "banana"}
        assert again == state

    def test_create_with_source_url(
        self, resource: ProjectResource, httpx_mock: HTTPXMock,
        sample_project: dict, sample_deployment: dict, sample_deployed_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects", method="POST", json=sample_project)
        httpx_mock.add_response(
            url=f"{API}/projects/proj-1/deployments", method="POST", json=sample_deployment,
        )
        httpx_mock.add_response(
            url=f"{API}/projects/proj-1", method="GET", json=sample_deployed_project,
        )

        _, state = resource.create({"name": "demo", "source_url": SOURCE})

        deploy_body = orjson.loads(httpx_mock.get_requests()[1].content)
        assert deploy_body == {"url": SOURCE, "production": True}
        assert state["has_production_deployment"] is True
        assert state["production_deployment"]["url"] == SOURCE
        assert state["production_deployment"]["domain_mappings"][0]["domain"] == "demo-dep-1.deno.dev"
        assert state["source_url"] == SOURCE

    def test_create_with_github_link_uses_new_project_id(
        self, resource: ProjectResource, httpx_mock: HTTPXMock,
        sample_project: dict, sample_git_link: dict,
    ) -> None:
        linked = {**sample_project, "git": sample_git_link}
        httpx_mock.add_response(url=f"{API}/projects", method="POST", json=sample_project)
        httpx_mock.add_response(url=f"{API}/github/link", method="POST", json=linked)
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", json=linked)

        _, state = resource.create({"name": "demo", "github_link": LINK})

        link_body = orjson.loads(httpx_mock.get_requests()[1].content)
        assert link_body["projectId"] == "proj-1"
        assert state["github_link"] == LINK

    def test_source_and_github_conflict(
        self, resource: ProjectResource, httpx_mock: HTTPXMock,
    ) -> None:
        with pytest.raises(ValueError, match="conflicts"):
            resource.create({"name": "demo", "source_url": SOURCE, "github_link": LINK})

        assert httpx_mock.get_requests() == []

    def test_failed_link_does_not_roll_back(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, sample_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects", method="POST", json=sample_project)
        httpx_mock.add_response(
            url=f"{API}/github/link", method="POST", status_code=400, text="no access",
        )

        with pytest.raises(DeployApiError):
            resource.create({"name": "demo", "github_link": LINK})

        assert _calls(httpx_mock) == [("POST", "/api/projects"), ("POST", "/api/github/link")]


class TestRead:
    """read 테스트."""

    def test_not_found_returns_none(
        self, resource: ProjectResource, httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", status_code=404, text="not found")

        assert resource.read("proj-1", {"name": "demo"}) is None

    def test_other_errors_propagate(
        self, resource: ProjectResource, httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", status_code=500, text="boom")

        with pytest.raises(DeployApiError):
            resource.read("proj-1", {"name": "demo"})

    def test_source_url_tracks_production_url(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, sample_deployed_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", json=sample_deployed_project)

        state = resource.read("proj-1", {"name": "demo", "source_url": "https://old.test/a.js"})

        assert state is not None
        assert state["source_url"] == SOURCE

    def test_untracked_source_url_left_alone(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, sample_deployed_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", json=sample_deployed_project)

        state = resource.read("proj-1", {"name": "demo"})

        assert state is not None
        assert "source_url" not in state

    def test_exists(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, sample_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", json=sample_project)
        httpx_mock.add_response(url=f"{API}/projects/proj-2", status_code=404)

        assert resource.exists("proj-1", {}) is True
        assert resource.exists("proj-2", {}) is False


class TestUpdate:
    """update 테스트."""

    @pytest.fixture()
    def prior(self) -> dict[str, Any]:
        return {
            "project_id": "proj-1",
            "name": "demo",
            "env_vars": {},
            "source_url": None,
            "github_link": None,
            "has_production_deployment": False,
            "production_deployment": None,
        }

    def test_unchanged_is_noop(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, prior: dict,
    ) -> None:
        desired = {"name": "demo", "env_vars": {}}

        assert resource.update("proj-1", prior, desired) == prior
        assert httpx_mock.get_requests() == []

    def test_name_change_only(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, prior: dict, sample_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="PATCH")
        httpx_mock.add_response(
            url=f"{API}/projects/proj-1", method="GET", json={**sample_project, "name": "renamed"},
        )

        state = resource.update("proj-1", prior, {**prior, "name": "renamed"})

        assert state["name"] == "renamed"
        assert _calls(httpx_mock) == [
            ("PATCH", "/api/projects/proj-1"),
            ("GET", "/api/projects/proj-1"),
        ]

    def test_env_vars_replaced(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, prior: dict, sample_project: dict,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1/env", method="POST")
        httpx_mock.add_response(
            url=f"{API}/projects/proj-1", method="GET",
            json={**sample_project, "envVars": {"fruit": "banana"}},
        )

        state = resource.update("proj-1", prior, {**prior, "env_vars": {"fruit": "banana"}})

        assert orjson.loads(httpx_mock.get_requests()[0].content) == {"fruit": "banana"}
        assert state["env_vars"] == {"fruit": "banana"}
        assert len(httpx_mock.get_requests()) == 2

    def test_set_source_url_creates_production_deployment(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, prior: dict,
        sample_deployment: dict, sample_deployed_project: dict,
    ) -> None:
        httpx_mock.add_response(
            url=f"{API}/projects/proj-1/deployments", method="POST", json=sample_deployment,
        )
        httpx_mock.add_response(
            url=f"{API}/projects/proj-1", method="GET", json=sample_deployed_project,
        )

        state = resource.update("proj-1", prior, {**prior, "source_url": SOURCE})

        body = orjson.loads(httpx_mock.get_requests()[0].content)
        assert body == {"url": SOURCE, "production": True}
        assert state["has_production_deployment"] is True
        assert state["production_deployment"]["url"] == SOURCE

    def test_link_then_unlink(
        self, resource: ProjectResource, httpx_mock: HTTPXMock, prior: dict,
        sample_project: dict, sample_git_link: dict,
    ) -> None:
        linked = {**sample_project, "git": sample_git_link}
        httpx_mock.add_response(url=f"{API}/github/link", method="POST", json=linked)
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", json=linked)
        httpx_mock.add_response(url=f"{API}/projects/proj-1/git", method="DELETE")
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", json=sample_project)

        linked_state = resource.update("proj-1", prior, {**prior, "github_link": LINK})
        assert linked_state["github_link"] == LINK

        unlinked_state = resource.update(
            "proj-1", linked_state, {**linked_state, "github_link": None},
        )

        assert unlinked_state["github_link"] is None
        assert _calls(httpx_mock) == [
            ("POST", "/api/github/link"),
            ("GET", "/api/projects/proj-1"),
            ("DELETE", "/api/projects/proj-1/git"),
            ("GET", "/api/projects/proj-1"),
        ]


class TestDelete:
    """delete 테스트."""

    def test_delete(self, resource: ProjectResource, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="DELETE")

        resource.delete("proj-1", {})

        assert _calls(httpx_mock) == [("DELETE", "/api/projects/proj-1")]

    def test_delete_twice_is_idempotent(
        self, resource: ProjectResource, httpx_mock: HTTPXMock,
    ) -> None:
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="DELETE")
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="DELETE", status_code=404)
        httpx_mock.add_response(url=f"{API}/projects/proj-1", method="GET", status_code=404)

        resource.delete("proj-1", {})
        resource.delete("proj-1", {})

        assert resource.read("proj-1", {}) is None
