"""deploy_user 데이터 소스 (토큰 소유자)."""

from __future__ import annotations

import logging

from deploy_provider.resources.base import DataSource, State

logger = logging.getLogger(__name__)


class UserDataSource(DataSource):
    name = "deploy_user"

    def read(self) -> State:
        user = self._client.current_user()
        logger.debug("Received caller identity: %s %s", user.id, user.name)
        return {
            "id": user.id,
            "login": user.login,
            "name": user.name,
            "github_id": str(user.github_id),
        }
