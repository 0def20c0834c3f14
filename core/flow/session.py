"""
core/flow/session.py - 레코드 처리 세션

처리기(processor)가 레코드를 꺼내고(get), 패널티를 부여하고(penalize),
출력 관계(success/failure)로 전달(transfer)하는 인메모리 세션입니다.

Example:
    session = ProcessSession([FlowRecord(attributes={"filename": "a.csv"})])

    record = session.get()
    session.transfer(record, Relationship.SUCCESS)

    assert session.transferred(Relationship.SUCCESS) == [record]
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Iterable
from enum import Enum

from core.config import settings
from core.exceptions import RoutingError

from .record import FlowRecord

logger = logging.getLogger(__name__)


class Relationship(Enum):
    """출력 관계"""

    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def description(self) -> str:
        if self is Relationship.SUCCESS:
            return "처리에 성공한 레코드"
        return "처리에 실패한 레코드"


class ProcessSession:
    """인메모리 레코드 처리 세션

    레코드 하나는 정확히 한 번만 전달될 수 있습니다.
    """

    def __init__(
        self,
        records: Iterable[FlowRecord] = (),
        penalty_seconds: float = settings.PENALTY_SECONDS,
    ):
        self._queue: deque[FlowRecord] = deque(records)
        self._transferred: dict[Relationship, list[FlowRecord]] = {rel: [] for rel in Relationship}
        self._routed_ids: set[str] = set()
        self.penalty_seconds = penalty_seconds

    def enqueue(self, record: FlowRecord) -> None:
        """입력 큐에 레코드 추가"""
        self._queue.append(record)

    def get(self) -> FlowRecord | None:
        """다음 레코드 (없으면 None)"""
        if not self._queue:
            return None
        return self._queue.popleft()

    def penalize(self, record: FlowRecord) -> FlowRecord:
        """레코드에 패널티 부여 (penalty_seconds 동안 재처리 지연)"""
        record.penalty_expiration = time.time() + self.penalty_seconds
        return record

    def rollback(self, record: FlowRecord) -> None:
        """처리 중단된 레코드를 입력 큐 맨 앞으로 되돌림

        Raises:
            RoutingError: 이미 전달된 레코드인 경우
        """
        if record.record_id in self._routed_ids:
            raise RoutingError(record.record_id, "이미 전달된 레코드는 되돌릴 수 없음")

        self._queue.appendleft(record)
        logger.debug(f"{record} 입력 큐로 롤백")

    def transfer(self, record: FlowRecord, relationship: Relationship) -> None:
        """레코드를 출력 관계로 전달

        Raises:
            RoutingError: 이미 전달된 레코드인 경우
        """
        if record.record_id in self._routed_ids:
            raise RoutingError(record.record_id, "이미 전달된 레코드")

        self._routed_ids.add(record.record_id)
        self._transferred[relationship].append(record)
        logger.debug(f"{record} → {relationship.value}")

    def transferred(self, relationship: Relationship) -> list[FlowRecord]:
        """관계별 전달된 레코드 목록"""
        return list(self._transferred[relationship])

    @property
    def queue_size(self) -> int:
        return len(self._queue)
