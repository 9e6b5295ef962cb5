"""deploy_custom_domain_validation 논리 리소스.

생성 = 도메인 검증 + 인증서 발급. 둘 중 하나라도 실패하면 생성 전체가 실패한다.
삭제할 원격 리소스가 없으므로 delete는 아무 것도 하지 않는다.
"""

from __future__ import annotations

import logging

from deploy_provider.client import DeployError, DeployNotFoundError
from deploy_provider.resources.base import ResourceAdapter, State, changed

logger = logging.getLogger(__name__)


class DomainValidationError(DeployError):
    """도메인이 검증되지 않았거나 인증서가 없다."""


class CustomDomainValidationResource(ResourceAdapter):
    name = "deploy_custom_domain_validation"
    force_new = frozenset({"project_id", "custom_domain"})

    def create(self, desired: State) -> tuple[str, State]:
        project_id = desired["project_id"]
        domain_name = desired["custom_domain"]

        domain = self._client.get_domain(project_id, domain_name)
        self._client.verify_domain(project_id, domain_name)
        self._client.provision_certificate(project_id, domain_name)
        logger.info(
            "Validated domain %s", domain_name,
            extra={"event_code": "RESOURCE_CREATE", "resource": self.name,
                   "project_id": project_id},
        )

        identity = domain.created_at
        observed = self.read(identity, desired)
        if observed is None:
            raise DeployNotFoundError(404, f"domain {domain_name} vanished during validation")
        return identity, observed

    def read(self, identity: str, state: State) -> State | None:
        project_id = state["project_id"]
        domain_name = state["custom_domain"]
        try:
            domain = self._client.get_domain(project_id, domain_name)
        except DeployNotFoundError:
            return None

        if not domain.is_validated or not domain.certificates:
            raise DomainValidationError(
                f"domain {domain_name} is either not validated or does not have any certificates"
            )
        return {"project_id": project_id, "custom_domain": domain_name}

    def update(self, identity: str, prior: State, desired: State) -> State:
        replaced = sorted(key for key in self.force_new if changed(prior, desired, key))
        if replaced:
            raise ValueError(
                f"{self.name}: changing {', '.join(replaced)} requires replacement"
            )
        return prior

    def delete(self, identity: str, state: State) -> None:
        logger.debug("Nothing to delete for logical resource %s", identity)
