"""Deploy 플랫폼 provider 코어 (REST 클라이언트 + 리소스 어댑터)."""

__version__ = "0.1.0"
