"""YAML 설정 로딩 + Pydantic 모델."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"


# ── 설정 모델 ──────────────────────────────────────────


class DeployApiConfig(BaseModel):
    base_url: str = "https://dash.deno.com"
    token_env_var: str = "DEPLOY_TOKEN"
    request_timeout_sec: float | None = None  # None이면 httpx 기본값


class ProviderConfig(BaseModel):
    """Provider 전체 설정."""

    api_token: str
    api: DeployApiConfig = Field(default_factory=DeployApiConfig)

    @field_validator("api_token")
    @classmethod
    def api_token_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("api_token must not be empty")
        return v


# ── 로딩 ───────────────────────────────────────────────


def load_config(path: Path | None = None) -> ProviderConfig:
    """YAML 설정 파일을 로딩하고 Pydantic 모델로 검증한다.

    우선순위: config.yaml의 api_token > 시스템 환경변수 > .env 파일
    기본 경로의 config.yaml이 없으면 환경변수만으로 구성한다.
    """
    config_path = path or _DEFAULT_CONFIG_PATH

    # .env 파일 로딩: config.yaml과 같은 디렉터리의 .env를 탐색
    dotenv_path = config_path.parent / ".env"
    load_dotenv(dotenv_path=dotenv_path, override=False)

    if path is None and not config_path.exists():
        raw: dict = {}
    else:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
        if raw is None:
            raise ValueError(f"Empty config file: {config_path}")

    # 환경변수 fallback (api_token)
    api_raw = raw.get("api") or {}
    token_env_var = api_raw.get("token_env_var", DeployApiConfig().token_env_var)
    if not raw.get("api_token"):
        raw["api_token"] = os.environ.get(token_env_var, "")

    return ProviderConfig.model_validate(raw)
