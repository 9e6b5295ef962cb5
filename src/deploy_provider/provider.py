"""Provider — 리소스/데이터 소스 어댑터 레지스트리.

호스트 프레임워크는 이름(deploy_project 등)으로 어댑터를 찾아 호출한다.
모든 어댑터는 하나의 DeployClient를 공유한다.
"""

from __future__ import annotations

import logging
from typing import Any

from deploy_provider.client import DeployClient
from deploy_provider.config import ProviderConfig
from deploy_provider.resources import (
    CustomDomainResource,
    CustomDomainValidationResource,
    DataSource,
    ProjectResource,
    ResourceAdapter,
    UserDataSource,
)

logger = logging.getLogger(__name__)


class Provider:
    """어댑터 등록/조회."""

    def __init__(self, client: DeployClient) -> None:
        self.client = client
        self._resources: dict[str, ResourceAdapter] = {}
        self._data_sources: dict[str, DataSource] = {}

    @classmethod
    def from_config(cls, config: ProviderConfig) -> Provider:
        """설정으로 클라이언트를 만들고 기본 어댑터를 모두 등록한다."""
        provider = cls(DeployClient(config.api, token=config.api_token))
        for resource_cls in (
            ProjectResource, CustomDomainResource, CustomDomainValidationResource,
        ):
            provider.register_resource(resource_cls(provider.client))
        provider.register_data_source(UserDataSource(provider.client))
        return provider

    def register_resource(self, adapter: ResourceAdapter) -> None:
        if adapter.name in self._resources:
            raise ValueError(f"Resource already registered: {adapter.name}")
        self._resources[adapter.name] = adapter
        logger.debug("Registered resource: %s", adapter.name)

    def register_data_source(self, source: DataSource) -> None:
        if source.name in self._data_sources:
            raise ValueError(f"Data source already registered: {source.name}")
        self._data_sources[source.name] = source
        logger.debug("Registered data source: %s", source.name)

    def resource(self, name: str) -> ResourceAdapter:
        try:
            return self._resources[name]
        except KeyError:
            raise KeyError(
                f"Unknown resource {name!r} (known: {', '.join(self.resource_names())})"
            ) from None

    def data_source(self, name: str) -> DataSource:
        try:
            return self._data_sources[name]
        except KeyError:
            raise KeyError(
                f"Unknown data source {name!r} (known: {', '.join(self.data_source_names())})"
            ) from None

    def resource_names(self) -> list[str]:
        return sorted(self._resources)

    def data_source_names(self) -> list[str]:
        return sorted(self._data_sources)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> Provider:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
