"""
core/flow - 레코드 처리 흐름

처리기가 동작하는 최소 호스트 계약입니다.

주요 구성 요소:
- FlowRecord: 속성(attributes)을 가진 레코드
- ProcessSession / Relationship: 레코드 입력, 패널티, success/failure 라우팅
- PropertyDescriptor / ProcessContext: 프로퍼티 정의, 검증, `${name}` 치환
"""

from .properties import (
    PropertyDescriptor,
    PropertyValue,
    ProcessContext,
    boolean_validator,
    interpolate,
    non_empty_validator,
    string_length_validator,
)
from .record import FlowRecord
from .session import ProcessSession, Relationship

__all__: list[str] = [
    # Record
    "FlowRecord",
    # Session
    "ProcessSession",
    "Relationship",
    # Properties
    "PropertyDescriptor",
    "PropertyValue",
    "ProcessContext",
    "boolean_validator",
    "non_empty_validator",
    "string_length_validator",
    "interpolate",
]
