"""deploy_custom_domain 리소스 어댑터.

project_id, domain_name은 변경 시 재생성(force new) 대상이다.
records에는 사용자가 등록기관에 만들어야 하는 DNS 레코드가 담긴다.
"""

from __future__ import annotations

import logging

from deploy_provider.client import DeployNotFoundError
from deploy_provider.models import Domain
from deploy_provider.resources.base import ResourceAdapter, State, changed

logger = logging.getLogger(__name__)

# Deploy 엣지 주소
EDGE_IPV4 = "34.120.54.55"
EDGE_IPV6 = "2600:1901:0:6d85::"
VALIDATION_TXT_PREFIX = "deno-com-validation="


def dns_records(domain: Domain) -> list[dict[str, str]]:
    """도메인 검증과 라우팅에 필요한 DNS 레코드 목록."""
    return [
        {"domain_name": domain.domain, "type": "A", "value": EDGE_IPV4},
        {"domain_name": domain.domain, "type": "AAAA", "value": EDGE_IPV6},
        {"domain_name": domain.domain, "type": "TXT",
         "value": f"{VALIDATION_TXT_PREFIX}{domain.token}"},
    ]


class CustomDomainResource(ResourceAdapter):
    name = "deploy_custom_domain"
    force_new = frozenset({"project_id", "domain_name"})

    def create(self, desired: State) -> tuple[str, State]:
        project_id = desired["project_id"]
        domain_name = desired["domain_name"]
        self._client.add_domain(project_id, domain_name)
        logger.info(
            "Added domain %s", domain_name,
            extra={"event_code": "RESOURCE_CREATE", "resource": self.name,
                   "project_id": project_id},
        )

        observed = self.read(domain_name, desired)
        if observed is None:
            raise DeployNotFoundError(404, f"domain {domain_name} vanished after create")
        return domain_name, observed

    def read(self, identity: str, state: State) -> State | None:
        project_id = state["project_id"]
        try:
            domain = self._client.get_domain(project_id, identity)
        except DeployNotFoundError:
            logger.info(
                "Domain %s not found, treating as deleted", identity,
                extra={"event_code": "RESOURCE_GONE", "resource": self.name,
                       "project_id": project_id},
            )
            return None

        return {
            "project_id": project_id,
            "domain_name": domain.domain,
            "records": dns_records(domain),
            "is_validated": domain.is_validated,
        }

    def update(self, identity: str, prior: State, desired: State) -> State:
        replaced = sorted(key for key in self.force_new if changed(prior, desired, key))
        if replaced:
            raise ValueError(
                f"{self.name}: changing {', '.join(replaced)} requires replacement"
            )
        return prior

    def delete(self, identity: str, state: State) -> None:
        try:
            self._client.delete_domain(state["project_id"], identity)
        except DeployNotFoundError:
            logger.info("Domain %s already deleted", identity)
            return
        logger.info(
            "Deleted domain %s", identity,
            extra={"event_code": "RESOURCE_DELETE", "resource": self.name,
                   "project_id": state["project_id"]},
        )
