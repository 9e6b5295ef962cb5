"""Deploy API 데이터 모델 (Pydantic).

- API 응답은 camelCase, 파이썬 속성은 snake_case (alias_generator)
- 있을 수도 없을 수도 있는 엔티티는 `X | None`으로 표현
- Deployment는 소속 Project를 project_id로만 참조 (순환 참조 없음)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Domain.certificates 에 들어오는 값
TLS_CIPHER_RSA = "rsa"
TLS_CIPHER_EC = "ec"


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _none_to_empty(v: Any, empty: Any) -> Any:
    return empty if v is None else v


# ── 엔티티 ─────────────────────────────────────────────


class Repository(ApiModel):
    id: int
    owner: str
    name: str


class GitHubLink(ApiModel):
    """Project에 연결된 GitHub 저장소 + entrypoint."""

    repository: Repository
    entrypoint: str
    updated_at: str = ""
    created_at: str = ""


class DomainMapping(ApiModel):
    domain: str
    updated_at: str = ""
    created_at: str = ""


class CommitInfo(ApiModel):
    """push로 생성된 Deployment의 커밋 요약."""

    hash: str
    message: str
    author_name: str
    author_email: str
    author_github_username: str | None = None
    url: str | None = None


class Deployment(ApiModel):
    """Project 소스의 불변 스냅샷.

    응답에 포함된 `project` 객체는 버리고 project_id만 유지한다.
    """

    id: str
    url: str
    domain_mappings: list[DomainMapping] = Field(default_factory=list)
    related_commit: CommitInfo | None = None
    project_id: str = ""
    env_vars: dict[str, str] = Field(default_factory=dict)
    updated_at: str = ""
    created_at: str = ""

    @field_validator("domain_mappings", mode="before")
    @classmethod
    def _null_mappings(cls, v: Any) -> Any:
        return _none_to_empty(v, [])

    @field_validator("env_vars", mode="before")
    @classmethod
    def _null_env_vars(cls, v: Any) -> Any:
        return _none_to_empty(v, {})


class Project(ApiModel):
    """Deploy 프로젝트.

    처음 생성된 프로젝트는 production_deployment가 없고
    has_production_deployment=False 이다.
    """

    id: str
    name: str
    git: GitHubLink | None = None
    production_deployment: Deployment | None = None
    has_production_deployment: bool = False
    env_vars: dict[str, str] = Field(default_factory=dict)
    updated_at: str = ""
    created_at: str = ""

    @field_validator("env_vars", mode="before")
    @classmethod
    def _null_env_vars(cls, v: Any) -> Any:
        return _none_to_empty(v, {})

    @model_validator(mode="after")
    def _production_flag_matches(self) -> Project:
        if self.has_production_deployment != (self.production_deployment is not None):
            raise ValueError(
                "hasProductionDeployment must be true iff productionDeployment is set"
            )
        return self


class Domain(ApiModel):
    """Project의 커스텀 도메인."""

    domain: str
    token: str = ""
    is_validated: bool = False
    certificates: list[str] = Field(default_factory=list)
    project_id: str = ""
    updated_at: str = ""
    created_at: str = ""

    @field_validator("certificates", mode="before")
    @classmethod
    def _null_certificates(cls, v: Any) -> Any:
        return _none_to_empty(v, [])


class User(ApiModel):
    id: str
    login: str
    name: str = ""
    avatar_url: str = ""
    github_id: int = 0
    is_admin: bool = False
    is_blocked: bool = False
    updated_at: datetime | None = None
    created_at: datetime | None = None


# ── Pagination ─────────────────────────────────────────


class PagingInfo(ApiModel):
    page: int = 0
    count: int = 0
    limit: int = 0
    total_count: int = 0
    total_pages: int = 0


class DeploymentPage(BaseModel):
    """Deployment 목록 한 페이지.

    API는 `[deployments, pagingInfo]` 2원소 배열을 반환하므로
    이름 있는 필드로 풀어서 보관한다.
    """

    deployments: list[Deployment] = Field(default_factory=list)
    paging: PagingInfo = Field(default_factory=PagingInfo)

    @model_validator(mode="before")
    @classmethod
    def _from_positional(cls, data: Any) -> Any:
        if isinstance(data, list):
            if len(data) != 2:
                raise ValueError(
                    f"expected [deployments, pagingInfo], got {len(data)} elements"
                )
            return {"deployments": data[0], "paging": data[1]}
        return data


# ── 요청 바디 ──────────────────────────────────────────


class CreateProjectRequest(ApiModel):
    name: str
    env_vars: dict[str, str] = Field(default_factory=dict)


class UpdateProjectRequest(ApiModel):
    name: str


class NewDeploymentRequest(ApiModel):
    """새 Deployment 요청. url은 공개적으로 접근 가능해야 한다."""

    url: str
    production: bool | None = None  # None이면 바디에서 생략


class AddDomainRequest(ApiModel):
    domain: str


class LinkProjectRequest(ApiModel):
    project_id: str
    organization: str
    repo: str
    entrypoint: str
