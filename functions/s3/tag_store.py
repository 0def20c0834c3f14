"""
functions/s3/tag_store.py - S3 객체 태그 저장소

태깅 작업이 의존하는 원격 태그 저장소 포트(ObjectTagStore)와
boto3 기반 구현(S3ObjectTagStore)입니다.

중요: put_object_tagging은 기존 태그 세트 전체를 덮어씁니다.
기존 태그를 보존하려면 호출자가 조회 후 병합한 태그 세트를 전달해야 합니다.

참고:
- 버전 ID를 생략하면 객체의 현재(최신) 버전이 대상
- ClientError는 APICallError로 래핑되어 전달됨
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from botocore.exceptions import ClientError

from core.client import get_client
from core.exceptions import APICallError

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tag:
    """S3 객체 태그"""

    key: str
    value: str

    def to_api(self) -> dict[str, str]:
        """AWS API 형식 {"Key": ..., "Value": ...}"""
        return {"Key": self.key, "Value": self.value}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Tag:
        return cls(key=data["Key"], value=data.get("Value", ""))


class ObjectTagStore(Protocol):
    """원격 객체 태그 저장소 포트

    두 메서드 모두 원격 서비스 오류 시 APICallError를 발생시킵니다.
    """

    def get_tags(self, bucket: str, key: str) -> list[Tag]: ...

    def set_tags(self, bucket: str, key: str, tags: list[Tag], version: str | None = None) -> None: ...


class S3ObjectTagStore:
    """boto3 S3 client 기반 ObjectTagStore 구현"""

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_session(
        cls,
        session: boto3.Session,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> S3ObjectTagStore:
        """boto3 Session으로부터 생성"""
        return cls(get_client(session, "s3", region_name=region_name, endpoint_url=endpoint_url))

    def get_tags(self, bucket: str, key: str) -> list[Tag]:
        """객체의 현재 태그 세트 조회

        Raises:
            APICallError: GetObjectTagging 실패
        """
        try:
            response = self._client.get_object_tagging(Bucket=bucket, Key=key)
        except ClientError as e:
            raise APICallError.from_client_error("s3", "get_object_tagging", e) from e

        tags = [Tag.from_api(t) for t in response.get("TagSet", [])]
        logger.debug(f"s3://{bucket}/{key} 태그 {len(tags)}개 조회")
        return tags

    def set_tags(self, bucket: str, key: str, tags: list[Tag], version: str | None = None) -> None:
        """객체 태그 세트 적용 (기존 태그 세트를 대체)

        Args:
            bucket: 버킷 이름
            key: 객체 키
            tags: 적용할 태그 세트
            version: 객체 버전 ID (None이면 현재 버전)

        Raises:
            APICallError: PutObjectTagging 실패
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Tagging": {"TagSet": [t.to_api() for t in tags]},
        }
        if version:
            params["VersionId"] = version

        try:
            self._client.put_object_tagging(**params)
        except ClientError as e:
            raise APICallError.from_client_error("s3", "put_object_tagging", e) from e

        logger.debug(f"s3://{bucket}/{key} 태그 {len(tags)}개 적용 (version={version or 'current'})")
