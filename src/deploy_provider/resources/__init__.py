"""리소스/데이터 소스 어댑터."""

from .base import DataSource, ResourceAdapter, State
from .custom_domain import CustomDomainResource
from .custom_domain_validation import CustomDomainValidationResource, DomainValidationError
from .project import ProjectResource
from .user import UserDataSource

__all__ = [
    "CustomDomainResource",
    "CustomDomainValidationResource",
    "DataSource",
    "DomainValidationError",
    "ProjectResource",
    "ResourceAdapter",
    "State",
    "UserDataSource",
]
