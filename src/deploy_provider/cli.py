"""Deploy provider CLI.

deploy-provider whoami
deploy-provider projects --config config.yaml
deploy-provider deployments <PROJECT_ID> --page 2 --limit 10
deploy-provider domains <PROJECT_ID> --json-log
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import orjson
from pydantic import BaseModel, ValidationError

from deploy_provider.client import DeployClient, DeployError
from deploy_provider.config import load_config
from deploy_provider.logging_config import setup_logging

config_option = click.option(
    "--config", "config_path", type=click.Path(exists=True, path_type=Path),
    default=None, help="설정 파일 경로 (기본: config.yaml 또는 환경변수)",
)
json_log_option = click.option("--json-log", is_flag=True, help="JSON 형태 로그 출력")


def _dump(value: Any) -> None:
    """모델(또는 모델 목록)을 들여쓴 JSON으로 출력한다."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif isinstance(value, list):
        value = [v.model_dump(mode="json") for v in value]
    click.echo(orjson.dumps(value, option=orjson.OPT_INDENT_2).decode())


def _run(config_path: Path | None, json_log: bool, call: Callable[[DeployClient], Any]) -> None:
    """설정 로딩 → 클라이언트 생성 → 호출 → 결과 출력. 실패 시 exit code 1."""
    setup_logging(json_format=json_log)
    try:
        config = load_config(config_path)
    except (ValueError, ValidationError) as exc:
        click.echo(f"Error: invalid configuration: {exc}", err=True)
        sys.exit(1)

    with DeployClient(config.api, token=config.api_token) as client:
        try:
            result = call(client)
        except DeployError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
    _dump(result)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Deploy 플랫폼 리소스 조회."""


@main.command()
@config_option
@json_log_option
def whoami(config_path: Path | None, json_log: bool) -> None:
    """토큰 소유자 정보를 출력한다."""
    _run(config_path, json_log, lambda c: c.current_user())


@main.command()
@config_option
@json_log_option
def projects(config_path: Path | None, json_log: bool) -> None:
    """프로젝트 목록을 출력한다."""
    _run(config_path, json_log, lambda c: c.list_projects())


@main.command()
@click.argument("project_id")
@config_option
@json_log_option
def project(project_id: str, config_path: Path | None, json_log: bool) -> None:
    """프로젝트 하나를 출력한다."""
    _run(config_path, json_log, lambda c: c.get_project(project_id))


@main.command()
@click.argument("project_id")
@click.option("--page", default=0, type=click.IntRange(min=0), help="페이지 번호 (0이면 서버 기본값)")
@click.option("--limit", default=0, type=click.IntRange(min=0), help="페이지 크기 (0이면 서버 기본값)")
@config_option
@json_log_option
def deployments(
    project_id: str, page: int, limit: int, config_path: Path | None, json_log: bool,
) -> None:
    """Deployment 목록 한 페이지와 paging 정보를 출력한다."""
    _run(config_path, json_log, lambda c: c.list_deployments(project_id, page=page, limit=limit))


@main.command()
@click.argument("project_id")
@config_option
@json_log_option
def domains(project_id: str, config_path: Path | None, json_log: bool) -> None:
    """프로젝트의 커스텀 도메인 목록을 출력한다."""
    _run(config_path, json_log, lambda c: c.list_domains(project_id))
