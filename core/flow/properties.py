"""
core/flow/properties.py - 처리기 프로퍼티

처리기 설정값을 정의/검증하고, 레코드 속성으로 `${name}` 표현식을 치환합니다.

주요 구성 요소:
- PropertyDescriptor: 프로퍼티 정의 (필수 여부, 기본값, 검증기)
- PropertyValue: 설정값 + 레코드 기반 평가
- ProcessContext: 처리기의 설정값 모음 + 검증

Example:
    TAG_KEY = PropertyDescriptor(
        name="tag-key",
        display_name="Tag Key",
        required=True,
        expression_language_supported=True,
        validators=(string_length_validator(1, 127),),
    )

    context = ProcessContext([TAG_KEY], {"tag-key": "${category}"})
    context.validate()  # []
    context.get_property(TAG_KEY).evaluate({"category": "invoice"}).value  # "invoice"
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Optional

# 검증기: (프로퍼티명, 값) → 오류 메시지 또는 None
Validator = Callable[[str, str], Optional[str]]

_EXPRESSION_PATTERN = re.compile(r"\$\{([^}]*)\}")


# =============================================================================
# 검증기
# =============================================================================


def non_empty_validator(name: str, value: str) -> str | None:
    """빈 문자열 금지"""
    if not value:
        return f"{name}: 값이 비어있음"
    return None


def boolean_validator(name: str, value: str) -> str | None:
    """'true' 또는 'false'만 허용 (대소문자 무시)"""
    if value.lower() not in ("true", "false"):
        return f"{name}: bool 값이어야 함 (true/false), 실제값 '{value}'"
    return None


def string_length_validator(minimum: int, maximum: int) -> Validator:
    """문자열 길이 범위 검증기 생성"""

    def validate(name: str, value: str) -> str | None:
        if not minimum <= len(value) <= maximum:
            return f"{name}: 길이는 {minimum}~{maximum}자여야 함 (실제 {len(value)}자)"
        return None

    return validate


def has_expression(value: str) -> bool:
    """`${...}` 표현식 포함 여부"""
    return bool(_EXPRESSION_PATTERN.search(value))


def interpolate(value: str, attributes: Mapping[str, str]) -> str:
    """`${name}`을 레코드 속성값으로 치환 (없는 속성은 빈 문자열)"""
    return _EXPRESSION_PATTERN.sub(lambda m: attributes.get(m.group(1).strip(), ""), value)


# =============================================================================
# 프로퍼티
# =============================================================================


@dataclass(frozen=True)
class PropertyDescriptor:
    """프로퍼티 정의

    Attributes:
        name: 설정 키
        display_name: 표시 이름
        description: 설명
        required: 필수 여부
        default_value: 기본값
        allowable_values: 허용 값 목록 (None이면 제한 없음)
        expression_language_supported: `${name}` 치환 지원 여부
        validators: 검증기 목록
    """

    name: str
    display_name: str
    description: str = ""
    required: bool = False
    default_value: str | None = None
    allowable_values: tuple[str, ...] | None = None
    expression_language_supported: bool = False
    validators: tuple[Validator, ...] = ()

    def validate(self, value: str | None) -> list[str]:
        """설정값 검증

        표현식이 포함된 값은 레코드별로 결정되므로 검증기를 건너뜁니다.
        """
        if value is None:
            if self.required:
                return [f"{self.name}: 필수 프로퍼티 누락"]
            return []

        if self.expression_language_supported and has_expression(value):
            return []

        errors: list[str] = []
        if self.allowable_values is not None and value not in self.allowable_values:
            errors.append(f"{self.name}: 허용되지 않는 값 '{value}' (허용: {', '.join(self.allowable_values)})")

        for validator in self.validators:
            error = validator(self.name, value)
            if error:
                errors.append(error)

        return errors


@dataclass(frozen=True)
class PropertyValue:
    """프로퍼티 값"""

    value: str | None
    expression_language_supported: bool = False

    def evaluate(self, attributes: Mapping[str, str]) -> PropertyValue:
        """레코드 속성으로 표현식 평가"""
        if self.value is None or not self.expression_language_supported:
            return self
        return PropertyValue(interpolate(self.value, attributes), self.expression_language_supported)

    def is_blank(self) -> bool:
        return self.value is None or not self.value.strip()

    def as_bool(self) -> bool | None:
        if self.value is None:
            return None
        return self.value.strip().lower() == "true"


class ProcessContext:
    """처리기 설정 컨텍스트"""

    def __init__(self, descriptors: Sequence[PropertyDescriptor], values: Mapping[str, str] | None = None):
        self.descriptors = {d.name: d for d in descriptors}
        self.values = dict(values or {})

    def get_property(self, descriptor: PropertyDescriptor) -> PropertyValue:
        """프로퍼티 값 조회 (미설정 시 기본값)"""
        value = self.values.get(descriptor.name, descriptor.default_value)
        return PropertyValue(value, descriptor.expression_language_supported)

    def validate(self) -> list[str]:
        """전체 설정 검증

        Returns:
            오류 메시지 목록 (비어있으면 유효)
        """
        errors = [f"{name}: 알 수 없는 프로퍼티" for name in self.values if name not in self.descriptors]

        for descriptor in self.descriptors.values():
            errors.extend(descriptor.validate(self.get_property(descriptor).value))

        return errors
