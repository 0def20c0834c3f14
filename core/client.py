"""
core/client.py - boto3 client 생성 헬퍼

재시도, 타임아웃, 연결 풀이 설정된 boto3 client를 생성합니다.
재시도는 botocore가 담당하며 태깅 작업 자체는 재시도하지 않습니다.

Example:
    from core.client import get_client

    s3 = get_client(session, "s3", region_name="ap-northeast-2")

    # LocalStack / MinIO 등 S3 호환 엔드포인트 (path-style 주소 사용)
    s3 = get_client(session, "s3", endpoint_url="http://localhost:9000")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.config import Config

from .config import settings

if TYPE_CHECKING:
    import boto3

RetryMode = Literal["legacy", "standard", "adaptive"]

CONNECT_TIMEOUT = 10  # 초
MAX_POOL_CONNECTIONS = 10


def build_client_config(
    max_attempts: int = settings.API_RETRY_COUNT,
    retry_mode: RetryMode = "standard",
    read_timeout: int = settings.API_TIMEOUT,
    path_style: bool = False,
) -> Config:
    """botocore Config 생성

    Args:
        max_attempts: 최대 시도 횟수 (첫 호출 포함)
        retry_mode: botocore 재시도 모드
        read_timeout: 읽기 타임아웃 (초)
        path_style: S3 path-style 주소 사용 여부
    """
    options: dict[str, Any] = {
        "retries": {"max_attempts": max_attempts, "mode": retry_mode},
        "connect_timeout": CONNECT_TIMEOUT,
        "read_timeout": read_timeout,
        "max_pool_connections": MAX_POOL_CONNECTIONS,
    }
    if path_style:
        options["s3"] = {"addressing_style": "path"}
    return Config(**options)


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    endpoint_url: str | None = None,
    config: Config | None = None,
    **kwargs: Any,
) -> Any:
    """설정이 적용된 boto3 client 생성

    endpoint_url이 지정되면 S3 호환 스토리지를 위해 path-style 주소를 사용합니다.
    config를 넘기면 기본 설정 위에 병합됩니다.
    """
    client_config = build_client_config(path_style=endpoint_url is not None)
    if config is not None:
        client_config = client_config.merge(config)

    if endpoint_url is not None:
        kwargs["endpoint_url"] = endpoint_url

    # boto3-stubs는 서비스명으로 Literal 타입을 요구
    return session.client(cast(Any, service_name), region_name=region_name, config=client_config, **kwargs)
