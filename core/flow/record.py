"""
core/flow/record.py - 파이프라인 레코드

파이프라인을 흐르는 작업 단위(FlowRecord)를 정의합니다.
레코드는 문자열 키/값 속성(attributes)을 가집니다.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass
class FlowRecord:
    """파이프라인 레코드

    Attributes:
        attributes: 메타데이터 속성 (문자열 → 문자열)
        record_id: 레코드 식별자
        penalty_expiration: 패널티 만료 시각 (epoch 초, None이면 패널티 없음)
    """

    attributes: dict[str, str] = field(default_factory=dict)
    record_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    penalty_expiration: float | None = None

    def __str__(self) -> str:
        filename = self.attributes.get("filename")
        if filename:
            return f"FlowRecord[id={self.record_id}, filename={filename}]"
        return f"FlowRecord[id={self.record_id}]"

    @property
    def is_penalized(self) -> bool:
        """패널티 기간 중인지 여부"""
        return self.penalty_expiration is not None and self.penalty_expiration > time.time()

    def put_attributes(self, attributes: Mapping[str, str]) -> FlowRecord:
        """속성 추가/덮어쓰기"""
        self.attributes.update(attributes)
        return self

    def remove_attributes_with_prefix(self, prefix: str) -> list[str]:
        """접두사로 시작하는 모든 속성 제거

        Args:
            prefix: 속성 키 접두사 (예: "s3.tag.")

        Returns:
            제거된 속성 키 목록
        """
        removed = [key for key in self.attributes if key.startswith(prefix)]
        for key in removed:
            del self.attributes[key]
        return removed
