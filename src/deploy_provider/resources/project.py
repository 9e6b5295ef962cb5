"""deploy_project 리소스 어댑터.

속성:
- project_id (계산), name (필수), env_vars (선택)
- source_url / github_link (선택, 동시에 지정 불가)
- production_deployment, has_production_deployment (계산)

부분 실패 시 롤백하지 않는다. 예: 프로젝트 생성 후 GitHub 연결이 실패하면
프로젝트는 남아 있고 예외만 전파된다.
"""

from __future__ import annotations

import logging
from typing import Any

from deploy_provider.client import DeployNotFoundError
from deploy_provider.models import Deployment, LinkProjectRequest, NewDeploymentRequest, Project
from deploy_provider.resources.base import ResourceAdapter, State, changed

logger = logging.getLogger(__name__)


def _env_vars(state: State) -> dict[str, str]:
    return {k: str(v) for k, v in (state.get("env_vars") or {}).items()}


def _check_conflicts(desired: State) -> None:
    if desired.get("source_url") and desired.get("github_link"):
        raise ValueError('"source_url" conflicts with "github_link"')


def deployment_to_state(depl: Deployment | None) -> dict[str, Any] | None:
    """Deployment를 속성 dict로 평탄화한다."""
    if depl is None:
        return None

    commit = depl.related_commit
    return {
        "id": depl.id,
        "url": depl.url,
        "domain_mappings": [
            {"domain": m.domain, "updated_at": m.updated_at, "created_at": m.created_at}
            for m in depl.domain_mappings
        ],
        "related_commit": None if commit is None else {
            "hash": commit.hash,
            "message": commit.message,
            "author_name": commit.author_name,
            "author_email": commit.author_email,
            "author_github_username": commit.author_github_username or "",
            "url": commit.url or "",
        },
        "env_vars": dict(depl.env_vars),
        "updated_at": depl.updated_at,
        "created_at": depl.created_at,
    }


class ProjectResource(ResourceAdapter):
    name = "deploy_project"

    def _deploy_source(self, project_id: str, source_url: str) -> None:
        self._client.create_deployment(
            project_id, NewDeploymentRequest(url=source_url, production=True),
        )

    def _link(self, project_id: str, link: dict[str, Any]) -> None:
        self._client.link_github(LinkProjectRequest(
            project_id=project_id,
            organization=link["organization"],
            repo=link["repo"],
            entrypoint=link["entrypoint"],
        ))

    def create(self, desired: State) -> tuple[str, State]:
        _check_conflicts(desired)
        project = self._client.create_project(desired["name"], _env_vars(desired))
        logger.info(
            "Created project %s (%s)", project.name, project.id,
            extra={"event_code": "RESOURCE_CREATE", "resource": self.name,
                   "project_id": project.id},
        )

        if source_url := desired.get("source_url"):
            self._deploy_source(project.id, source_url)
        elif link := desired.get("github_link"):
            self._link(project.id, link)

        observed = self.read(project.id, desired)
        if observed is None:
            raise DeployNotFoundError(404, f"project {project.id} vanished after create")
        return project.id, observed

    def read(self, identity: str, state: State) -> State | None:
        try:
            project = self._client.get_project(identity)
        except DeployNotFoundError:
            logger.info(
                "Project %s not found, treating as deleted", identity,
                extra={"event_code": "RESOURCE_GONE", "resource": self.name,
                       "project_id": identity},
            )
            return None
        return self._to_state(project, state)

    def _to_state(self, project: Project, state: State) -> State:
        observed: State = dict(state)
        observed["project_id"] = project.id
        observed["name"] = project.name
        observed["env_vars"] = dict(project.env_vars)
        observed["has_production_deployment"] = project.has_production_deployment
        observed["production_deployment"] = deployment_to_state(project.production_deployment)

        # source_url은 추적 중일 때만 실제 production URL로 갱신
        depl = project.production_deployment
        if depl is not None and state.get("source_url") and state["source_url"] != depl.url:
            observed["source_url"] = depl.url

        if project.git is not None:
            observed["github_link"] = {
                "organization": project.git.repository.owner,
                "repo": project.git.repository.name,
                "entrypoint": project.git.entrypoint,
            }
        else:
            observed["github_link"] = None
        return observed

    def update(self, identity: str, prior: State, desired: State) -> State:
        _check_conflicts(desired)
        groups = [
            key for key in ("name", "env_vars", "source_url", "github_link")
            if changed(prior, desired, key)
        ]
        if not groups:
            return prior

        logger.info(
            "Updating project %s: %s", identity, ", ".join(groups),
            extra={"event_code": "RESOURCE_UPDATE", "resource": self.name,
                   "project_id": identity},
        )

        if "name" in groups:
            self._client.update_project(identity, desired["name"])

        if "env_vars" in groups:
            self._client.update_env_vars(identity, _env_vars(desired))

        if "source_url" in groups and desired.get("source_url"):
            self._deploy_source(identity, desired["source_url"])

        if "github_link" in groups:
            if link := desired.get("github_link"):
                self._link(identity, link)
            else:
                self._client.unlink_github(identity)

        observed = self.read(identity, desired)
        if observed is None:
            raise DeployNotFoundError(404, f"project {identity} vanished during update")
        return observed

    def delete(self, identity: str, state: State) -> None:
        try:
            self._client.delete_project(identity)
        except DeployNotFoundError:
            logger.info("Project %s already deleted", identity)
            return
        logger.info(
            "Deleted project %s", identity,
            extra={"event_code": "RESOURCE_DELETE", "resource": self.name,
                   "project_id": identity},
        )
