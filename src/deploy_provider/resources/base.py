"""리소스 어댑터 인터페이스.

호스트 reconciliation 프레임워크는 리소스 타입마다 이 인터페이스만 호출한다.
상태는 속성 이름 → 값의 dict(attribute bag)로 주고받는다.

- create: (identity, 관측 상태) 반환. 생성 직후 항상 read로 계산 필드를 채운다
- read: 리소스가 없으면 None (다른 에러는 그대로 전파)
- update: 바뀐 필드 그룹만 API 호출, 변경이 없으면 HTTP 호출 없음
- delete: 이미 없어도 성공 (멱등)
- exists: read 결과를 bool로 반환
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from deploy_provider.client import DeployClient

State = dict[str, Any]


def changed(prior: State, desired: State, key: str) -> bool:
    """prior와 desired 사이에 key 값이 달라졌는지 판단한다 (빈 값은 None 취급)."""
    return (prior.get(key) or None) != (desired.get(key) or None)


class ResourceAdapter(ABC):
    """리소스 타입 하나의 CRUD 어댑터."""

    name: str = ""
    force_new: frozenset[str] = frozenset()

    def __init__(self, client: DeployClient) -> None:
        self._client = client

    @abstractmethod
    def create(self, desired: State) -> tuple[str, State]:
        """desired 상태로 리소스를 만들고 (identity, 관측 상태)를 반환한다."""

    @abstractmethod
    def read(self, identity: str, state: State) -> State | None:
        """현재 상태를 조회한다. 리소스가 없으면 None."""

    @abstractmethod
    def update(self, identity: str, prior: State, desired: State) -> State:
        """prior → desired 차이만 반영하고 관측 상태를 반환한다."""

    @abstractmethod
    def delete(self, identity: str, state: State) -> None:
        """리소스를 삭제한다. 이미 없으면 아무 일도 하지 않는다."""

    def exists(self, identity: str, state: State) -> bool:
        return self.read(identity, state) is not None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class DataSource(ABC):
    """읽기 전용 데이터 소스."""

    name: str = ""

    def __init__(self, client: DeployClient) -> None:
        self._client = client

    @abstractmethod
    def read(self) -> State:
        """현재 값을 조회한다."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
