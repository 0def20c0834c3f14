"""
functions/s3/tag_object.py - S3 객체 태그 설정

레코드가 가리키는 S3 객체에 태그를 설정(append) 또는 교체(replace)하고,
적용한 태그를 레코드 속성 `s3.tag.<key>`로 기록합니다.

동작:
    1. append 모드: 기존 태그 조회 후 같은 키의 태그만 제거
       replace 모드: 빈 태그 세트에서 시작 (기존 태그 모두 삭제)
    2. 새 태그를 마지막에 추가
    3. put_object_tagging (버전 ID가 있으면 해당 버전 대상)
    4. 원격 오류 → 패널티 후 failure (속성 변경 없음)
    5. 성공 → replace 모드면 기존 `s3.tag.*` 속성 제거 후 새 속성 기록, success
    6. 그 외 예외(BotoCoreError 등) → 레코드를 입력 큐로 되돌린 뒤 전파

참고:
- 객체가 없는 경우(NoSuchKey)도 다른 서비스 오류와 동일하게 failure로 라우팅
- 재시도는 하지 않음 (패널티 후 호스트가 다시 트리거)

Example:
    processor = TagS3Object(S3ObjectTagStore.from_session(session))
    context = ProcessContext(TagS3Object.PROPERTIES, {
        "Bucket": "my-bucket",
        "tag-key": "status",
        "tag-value": "archived",
    })
    processor.on_trigger(context, session)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from core.config import settings
from core.exceptions import APICallError, is_access_denied, is_not_found
from core.flow import (
    FlowRecord,
    ProcessContext,
    ProcessSession,
    PropertyDescriptor,
    Relationship,
    boolean_validator,
    non_empty_validator,
    string_length_validator,
)

from .tag_store import ObjectTagStore, Tag

logger = logging.getLogger(__name__)

# 태그 속성 접두사 (s3.tag.<tag-key>)
TAG_ATTRIBUTE_PREFIX = settings.TAG_ATTRIBUTE_PREFIX

# =============================================================================
# 프로퍼티
# =============================================================================

BUCKET = PropertyDescriptor(
    name="Bucket",
    display_name="Bucket",
    description="태그를 설정할 객체의 S3 버킷",
    required=True,
    expression_language_supported=True,
    validators=(non_empty_validator,),
)

KEY = PropertyDescriptor(
    name="Object Key",
    display_name="Object Key",
    description="태그를 설정할 S3 객체 키",
    required=True,
    default_value="${filename}",
    expression_language_supported=True,
    validators=(non_empty_validator,),
)

VERSION_ID = PropertyDescriptor(
    name="Version",
    display_name="Version ID",
    description="태그를 설정할 객체 버전 (비어있으면 현재 버전)",
    required=False,
    expression_language_supported=True,
    validators=(non_empty_validator,),
)

TAG_KEY = PropertyDescriptor(
    name="tag-key",
    display_name="Tag Key",
    description="S3 객체에 설정할 태그 키",
    required=True,
    expression_language_supported=True,
    validators=(string_length_validator(1, settings.TAG_KEY_MAX_LENGTH),),
)

TAG_VALUE = PropertyDescriptor(
    name="tag-value",
    display_name="Tag Value",
    description="S3 객체에 설정할 태그 값",
    required=True,
    expression_language_supported=True,
    validators=(string_length_validator(1, settings.TAG_VALUE_MAX_LENGTH),),
)

APPEND_TAG = PropertyDescriptor(
    name="append-tag",
    display_name="Append Tag",
    description=(
        "true면 기존 태그 세트에 추가 (같은 키의 태그는 값만 갱신), "
        "false면 기존 태그를 모두 제거하고 새 태그만 설정"
    ),
    required=True,
    default_value="true",
    allowable_values=("true", "false"),
    expression_language_supported=False,
    validators=(boolean_validator,),
)


@dataclass(frozen=True)
class TagParameters:
    """레코드별로 평가된 태깅 파라미터

    Attributes:
        bucket: 버킷 이름
        key: 객체 키
        version: 객체 버전 ID (None이면 현재 버전)
        tag_key: 설정할 태그 키
        tag_value: 설정할 태그 값
        append_tag: True면 append, False면 replace
    """

    bucket: str
    key: str
    tag_key: str
    tag_value: str
    version: str | None = None
    append_tag: bool = True

    @classmethod
    def resolve(cls, context: ProcessContext, record: FlowRecord) -> TagParameters:
        """설정값을 레코드 속성으로 평가"""
        attrs = record.attributes
        version = context.get_property(VERSION_ID).evaluate(attrs)

        return cls(
            bucket=context.get_property(BUCKET).evaluate(attrs).value or "",
            key=context.get_property(KEY).evaluate(attrs).value or "",
            tag_key=context.get_property(TAG_KEY).evaluate(attrs).value or "",
            tag_value=context.get_property(TAG_VALUE).evaluate(attrs).value or "",
            version=None if version.is_blank() else version.value,
            append_tag=context.get_property(APPEND_TAG).as_bool() is not False,
        )

    @property
    def location(self) -> str:
        location = f"s3://{self.bucket}/{self.key}"
        if self.version:
            location = f"{location}?versionId={self.version}"
        return location


# =============================================================================
# 태깅 로직
# =============================================================================


def build_tag_set(existing: list[Tag], tag_key: str, tag_value: str) -> list[Tag]:
    """새 태그 세트 계산

    기존 태그 순서를 유지하면서 같은 키(대소문자 구분)의 태그를 모두 제거하고
    새 태그를 마지막에 추가합니다.
    """
    tags = [t for t in existing if t.key != tag_key]
    tags.append(Tag(tag_key, tag_value))
    return tags


def apply_tag_attributes(record: FlowRecord, params: TagParameters) -> FlowRecord:
    """적용된 태그를 레코드 속성에 기록"""
    if not params.append_tag:
        removed = record.remove_attributes_with_prefix(TAG_ATTRIBUTE_PREFIX)
        if removed:
            logger.debug(f"{record}: 기존 태그 속성 {len(removed)}개 제거")

    return record.put_attributes({f"{TAG_ATTRIBUTE_PREFIX}{params.tag_key}": params.tag_value})


def apply_tag(record: FlowRecord, params: TagParameters, store: ObjectTagStore) -> FlowRecord:
    """S3 객체에 태그 적용 후 레코드 속성 갱신

    Args:
        record: 트리거 레코드 (속성이 제자리에서 갱신됨)
        params: 평가된 태깅 파라미터
        store: 원격 태그 저장소

    Returns:
        갱신된 레코드

    Raises:
        APICallError: 태그 조회/적용 실패 (속성은 변경되지 않음)
    """
    existing = store.get_tags(params.bucket, params.key) if params.append_tag else []
    tags = build_tag_set(existing, params.tag_key, params.tag_value)
    store.set_tags(params.bucket, params.key, tags, version=params.version)

    return apply_tag_attributes(record, params)


def failure_reason(error: APICallError) -> str:
    """로그용 실패 원인 분류"""
    if is_not_found(error):
        return "대상 없음"
    if is_access_denied(error):
        return "권한 없음"
    return "실패"


# =============================================================================
# 처리기
# =============================================================================


class TagS3Object:
    """S3 객체 태그 설정 처리기

    세션에서 레코드를 하나 꺼내 태깅하고 success 또는 failure로 전달합니다.
    서비스 오류가 아닌 예외가 발생하면 레코드를 큐로 되돌린 뒤 예외를 전파합니다.
    """

    PROPERTIES: list[PropertyDescriptor] = [KEY, BUCKET, VERSION_ID, TAG_KEY, TAG_VALUE, APPEND_TAG]
    RELATIONSHIPS: list[Relationship] = [Relationship.SUCCESS, Relationship.FAILURE]

    def __init__(self, store: ObjectTagStore):
        self.store = store

    def on_trigger(self, context: ProcessContext, session: ProcessSession) -> Relationship | None:
        """레코드 하나 처리

        Returns:
            전달된 관계 (처리할 레코드가 없으면 None)
        """
        record = session.get()
        if record is None:
            return None

        start = time.perf_counter()
        try:
            params = TagParameters.resolve(context, record)
            apply_tag(record, params, self.store)
        except APICallError as e:
            session.transfer(session.penalize(record), Relationship.FAILURE)
            logger.error(
                f"{record} S3 객체 태깅 {failure_reason(e)} ({params.location}): {e}, "
                f"failure로 라우팅 (패널티 {session.penalty_seconds}초)"
            )
            return Relationship.FAILURE
        except Exception:
            session.rollback(record)
            raise

        session.transfer(record, Relationship.SUCCESS)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"{record} S3 객체 태깅 성공 ({params.location}, {elapsed_ms}ms), success로 라우팅")
        return Relationship.SUCCESS
