"""공통 fixture."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from deploy_provider.client import DeployClient
from deploy_provider.config import DeployApiConfig

API = "https://dash.deno.com/api"


@pytest.fixture()
def api_config() -> DeployApiConfig:
    return DeployApiConfig()


@pytest.fixture()
def client(api_config: DeployApiConfig) -> Iterator[DeployClient]:
    client = DeployClient(api_config, token="test-token")
    yield client
    client.close()


@pytest.fixture()
def sample_deployment() -> dict[str, Any]:
    """Deployment API 응답 샘플 (직접 조회 시 project 포함)."""
    return {
        "id": "dep-1",
        "url": "https://dash.deno.com/examples/hello.js",
        "domainMappings": [
            {
                "domain": "demo-dep-1.deno.dev",
                "updatedAt": "2021-06-01T00:00:00Z",
                "createdAt": "2021-06-01T00:00:00Z",
            },
        ],
        "relatedCommit": None,
        "project": {"id": "proj-1", "name": "demo", "hasProductionDeployment": False},
        "projectId": "proj-1",
        "envVars": {"foo": "bar"},
        "updatedAt": "2021-06-01T00:00:00Z",
        "createdAt": "2021-06-01T00:00:00Z",
    }


@pytest.fixture()
def sample_project() -> dict[str, Any]:
    """production deployment가 없는 새 프로젝트."""
    return {
        "id": "proj-1",
        "name": "demo",
        "hasProductionDeployment": False,
        "envVars": {},
        "updatedAt": "2021-06-01T00:00:00Z",
        "createdAt": "2021-06-01T00:00:00Z",
    }


@pytest.fixture()
def sample_deployed_project(
    sample_project: dict[str, Any], sample_deployment: dict[str, Any],
) -> dict[str, Any]:
    """production deployment가 있는 프로젝트 (embedded deployment는 project 생략)."""
    deployment = {k: v for k, v in sample_deployment.items() if k != "project"}
    return {
        **sample_project,
        "productionDeployment": deployment,
        "hasProductionDeployment": True,
    }


@pytest.fixture()
def sample_git_link() -> dict[str, Any]:
    return {
        "repository": {"id": 123456, "owner": "wperron", "name": "terraform-deploy-provider"},
        "entrypoint": "/deploy/testdata/main.ts",
        "updatedAt": "2021-06-02T00:00:00Z",
        "createdAt": "2021-06-02T00:00:00Z",
    }


@pytest.fixture()
def sample_domain() -> dict[str, Any]:
    return {
        "domain": "foo.example.org",
        "token": "abc123",
        "isValidated": False,
        "certificates": [],
        "projectId": "proj-1",
        "updatedAt": "2021-06-03T00:00:00Z",
        "createdAt": "2021-06-03T00:00:00Z",
    }


@pytest.fixture()
def sample_user() -> dict[str, Any]:
    return {
        "id": "user-1",
        "login": "wperron",
        "name": "Will",
        "avatarUrl": "https://avatars.githubusercontent.com/u/1",
        "githubId": 4242,
        "isAdmin": False,
        "isBlocked": False,
        "updatedAt": "2021-06-01T00:00:00Z",
        "createdAt": "2021-05-01T00:00:00Z",
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """임시 config.yaml 파일."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"api_token": "yaml-token", "api": {"base_url": "https://dash.deno.com"}}),
        encoding="utf-8",
    )
    return config_path
