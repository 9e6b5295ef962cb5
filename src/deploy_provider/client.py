"""Deploy REST API 동기 클라이언트.

Deploy 플랫폼의 Project, Deployment, Domain, User, GitHub 연결 API를 호출한다.
- httpx 기반 HTTP 클라이언트 (base_url은 설정으로 주입)
- Bearer 토큰 인증 (토큰이 없으면 헤더 생략)
- status >= 400 은 상태 코드 + 원본 바디를 담은 예외로 변환
- 재시도 없음: 모든 실패는 호출자에게 그대로 전파
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import httpx
import orjson
from pydantic import BaseModel, TypeAdapter, ValidationError

from deploy_provider.config import DeployApiConfig
from deploy_provider.models import (
    AddDomainRequest,
    CreateProjectRequest,
    Deployment,
    DeploymentPage,
    Domain,
    LinkProjectRequest,
    NewDeploymentRequest,
    Project,
    UpdateProjectRequest,
    User,
)

logger = logging.getLogger(__name__)


# ── 예외 ───────────────────────────────────────────────


class DeployError(Exception):
    """Deploy 클라이언트 예외의 공통 부모."""


class DeployTransportError(DeployError):
    """네트워크/DNS/TLS/타임아웃 등 요청 자체가 실패."""


class DeployApiError(DeployError):
    """API가 4xx/5xx를 반환. 바디는 파싱하지 않고 그대로 보관한다."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Deploy API error {status_code}: {body}")


class DeployNotFoundError(DeployApiError):
    """404 Not Found."""


class DeployDecodeError(DeployError):
    """응답 JSON이 깨졌거나 모델 검증에 실패."""


class DeployEncodeError(DeployError):
    """요청 바디 직렬화 실패."""


class UnsupportedOperationError(DeployError):
    """클라이언트가 지원하지 않는 작업."""


_PROJECTS = TypeAdapter(list[Project])
_DOMAINS = TypeAdapter(list[Domain])


def _encode(payload: BaseModel | dict[str, str]) -> bytes:
    """요청 모델(또는 dict)을 camelCase JSON 바이트로 직렬화한다."""
    try:
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        return orjson.dumps(payload)
    except (TypeError, ValueError) as e:
        raise DeployEncodeError(f"Could not encode request body: {e}") from e


class DeployClient:
    """Deploy REST API 클라이언트."""

    def __init__(self, config: DeployApiConfig, token: str | None = None) -> None:
        if token is None:
            token = os.environ.get(config.token_env_var, "")
        if not token:
            logger.warning("No API token configured, requests will be anonymous")

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        client_kwargs: dict[str, Any] = {}
        if config.request_timeout_sec is not None:
            client_kwargs["timeout"] = config.request_timeout_sec

        self._client = httpx.Client(base_url=config.base_url, headers=headers, **client_kwargs)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: bytes | None = None,
        response_type: Any = None,
    ) -> Any:
        """공통 요청 메서드 (요청 → 상태 확인 → 디코딩).

        response_type이 None이면 성공 여부만 확인하고 None을 반환한다.
        """
        logger.debug(
            "deploy sdk doing request %s %s", method, path,
            extra={"event_code": "API_REQUEST", "method": method, "path": path},
        )
        start = time.monotonic()
        try:
            resp = self._client.request(method, path, params=params, content=body)
        except httpx.TransportError as e:
            raise DeployTransportError(f"{method} {path} failed: {e}") from e

        if resp.status_code >= 400:
            logger.debug(
                "Request failed %s %s: %d", method, path, resp.status_code,
                extra={"event_code": "API_ERROR", "method": method, "path": path,
                       "status_code": resp.status_code,
                       "duration_ms": round((time.monotonic() - start) * 1000, 1)},
            )
            if resp.status_code == 404:
                raise DeployNotFoundError(resp.status_code, resp.text)
            raise DeployApiError(resp.status_code, resp.text)

        if response_type is None:
            return None

        try:
            data = orjson.loads(resp.content)
            if isinstance(response_type, TypeAdapter):
                return response_type.validate_python(data)
            return response_type.model_validate(data)
        except (orjson.JSONDecodeError, ValidationError) as e:
            raise DeployDecodeError(f"Could not decode response of {method} {path}: {e}") from e

    # ── Project ─────────────────────────────────────────────

    def list_projects(self) -> list[Project]:
        """GET /api/projects — 현재 사용자의 프로젝트 목록."""
        return self._request("GET", "/api/projects", response_type=_PROJECTS)

    def create_project(self, name: str, env_vars: dict[str, str] | None = None) -> Project:
        """POST /api/projects — 이름과 초기 환경변수로 프로젝트 생성."""
        body = _encode(CreateProjectRequest(name=name, env_vars=env_vars or {}))
        return self._request("POST", "/api/projects", body=body, response_type=Project)

    def get_project(self, project_id: str) -> Project:
        return self._request("GET", f"/api/projects/{project_id}", response_type=Project)

    def update_project(self, project_id: str, name: str) -> None:
        """PATCH /api/projects/{id} — 이름만 변경 가능."""
        body = _encode(UpdateProjectRequest(name=name))
        self._request("PATCH", f"/api/projects/{project_id}", body=body)

    def delete_project(self, project_id: str) -> None:
        """DELETE /api/projects/{id} — 소속 Deployment도 함께 삭제된다."""
        self._request("DELETE", f"/api/projects/{project_id}")

    # ── Deployment ──────────────────────────────────────────

    def create_deployment(self, project_id: str, request: NewDeploymentRequest) -> Deployment:
        """POST /api/projects/{id}/deployments — 소스 URL로 새 Deployment 생성.

        GitHub 연결 프로젝트는 push 시 자동으로 생성되므로 호출할 필요가 없다.
        """
        body = _encode(request)
        return self._request(
            "POST", f"/api/projects/{project_id}/deployments",
            body=body, response_type=Deployment,
        )

    def list_deployments(
        self, project_id: str, *, page: int = 0, limit: int = 0,
    ) -> DeploymentPage:
        """GET /api/projects/{id}/deployments — 한 페이지 + paging 정보.

        page/limit이 0이면 쿼리에서 생략하고 서버 기본값을 따른다.
        """
        params: dict[str, int] = {}
        if page:
            params["page"] = page
        if limit:
            params["limit"] = limit
        return self._request(
            "GET", f"/api/projects/{project_id}/deployments",
            params=params, response_type=DeploymentPage,
        )

    def get_deployment(self, project_id: str, deployment_id: str) -> Deployment:
        return self._request(
            "GET", f"/api/projects/{project_id}/deployments/{deployment_id}",
            response_type=Deployment,
        )

    def get_logs(self, project_id: str, deployment_id: str) -> Any:
        raise UnsupportedOperationError(
            f"log retrieval is not supported (project={project_id}, deployment={deployment_id})"
        )

    # ── 환경변수 / GitHub ───────────────────────────────────

    def update_env_vars(self, project_id: str, env_vars: dict[str, str]) -> None:
        """POST /api/projects/{id}/env — 병합이 아닌 전체 교체."""
        body = _encode(dict(env_vars))
        self._request("POST", f"/api/projects/{project_id}/env", body=body)

    def link_github(self, request: LinkProjectRequest) -> Project:
        """POST /api/github/link — 프로젝트를 GitHub 저장소에 연결."""
        body = _encode(request)
        return self._request("POST", "/api/github/link", body=body, response_type=Project)

    def unlink_github(self, project_id: str) -> None:
        """DELETE /api/projects/{id}/git — GitHub 연결 해제.

        이후 Deployment에만 영향을 준다. 연결 당시 만들어진 Deployment는 유지된다.
        """
        self._request("DELETE", f"/api/projects/{project_id}/git")

    # ── Domain ──────────────────────────────────────────────

    def list_domains(self, project_id: str) -> list[Domain]:
        return self._request(
            "GET", f"/api/projects/{project_id}/domains", response_type=_DOMAINS,
        )

    def add_domain(self, project_id: str, domain_name: str) -> Domain:
        """POST /api/projects/{id}/domains — 커스텀 도메인 추가 (미검증 상태)."""
        body = _encode(AddDomainRequest(domain=domain_name))
        return self._request(
            "POST", f"/api/projects/{project_id}/domains", body=body, response_type=Domain,
        )

    def get_domain(self, project_id: str, domain_name: str) -> Domain:
        """검증용 DNS 레코드에 필요한 token 등을 조회한다."""
        return self._request(
            "GET", f"/api/projects/{project_id}/domains/{domain_name}", response_type=Domain,
        )

    def delete_domain(self, project_id: str, domain_name: str) -> None:
        """Deploy 쪽 매핑만 제거한다. 등록기관의 DNS 레코드는 사용자가 지워야 한다."""
        self._request("DELETE", f"/api/projects/{project_id}/domains/{domain_name}")

    def verify_domain(self, project_id: str, domain_name: str) -> None:
        """DNS 레코드 검증을 요청한다. 레코드는 미리 만들어져 있어야 한다."""
        self._request("POST", f"/api/projects/{project_id}/domains/{domain_name}/verify")

    def provision_certificate(self, project_id: str, domain_name: str) -> None:
        """검증된 도메인에 TLS 인증서를 발급한다."""
        self._request("POST", f"/api/projects/{project_id}/domains/{domain_name}/certificates")

    # ── User ────────────────────────────────────────────────

    def current_user(self) -> User:
        """GET /api/user — 토큰 소유자."""
        return self._request("GET", "/api/user", response_type=User)

    def close(self) -> None:
        """httpx.Client를 종료한다."""
        self._client.close()

    def __enter__(self) -> DeployClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
