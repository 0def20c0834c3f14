"""
core/exceptions.py - 예외 계층 구조

예외 계층 구조:
    TaggerError (베이스)
    ├── APICallError (S3 API 호출 실패, ClientError 래핑)
    ├── ConfigError (프로퍼티 파일/설정)
    └── FlowError (레코드 처리 흐름)
        └── RoutingError (중복 전달)

APICallError만 서비스 실패로 취급되어 failure 라우팅 대상이 됩니다.
그 외 예외(BotoCoreError 등)는 호출자에게 그대로 전파됩니다.

Usage:
    from core.exceptions import APICallError

    try:
        client.put_object_tagging(Bucket=bucket, Key=key, Tagging=tagging)
    except ClientError as e:
        raise APICallError.from_client_error("s3", "put_object_tagging", e) from e
"""

from typing import Any, Dict, Optional, Tuple

# 객체/버킷/버전 없음
NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "NoSuchVersion", "NotFound", "404"})

# 권한 없음
ACCESS_DENIED_CODES = frozenset({"AccessDenied", "AccessDeniedException", "AllAccessDisabled"})

# 사용자 안내 문구
_FRIENDLY_MESSAGES = {
    "AccessDenied": "권한이 없습니다. s3:GetObjectTagging / s3:PutObjectTagging 권한을 확인하세요.",
    "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
    "InvalidTag": "태그 키 또는 값이 S3 태그 규칙에 맞지 않습니다.",
    "NoSuchBucket": "버킷이 존재하지 않습니다.",
    "NoSuchKey": "객체가 존재하지 않습니다.",
    "NoSuchVersion": "객체 버전이 존재하지 않습니다.",
}


def _client_error_info(error: BaseException) -> Tuple[Optional[str], Optional[str]]:
    """botocore ClientError 응답에서 (Code, Message) 추출"""
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return None, None
    info = response.get("Error", {})
    return info.get("Code"), info.get("Message")


class TaggerError(Exception):
    """s3-object-tagger 기본 예외

    Attributes:
        message: 에러 메시지
        cause: 원인 예외
        details: 추가 정보
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}" if self.cause else self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": None if self.cause is None else str(self.cause),
            "details": self.details,
        }


class APICallError(TaggerError):
    """AWS API 호출 실패

    메시지 형식: "{service}.{operation} 실패 ({code}): {message}"
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        parts = [f"{service}.{operation}"]
        if error_code:
            parts.append(f" 실패 ({error_code})")
        if error_message:
            parts.append(f": {error_message}")

        super().__init__(
            "".join(parts),
            cause,
            details={"service": service, "operation": operation, "error_code": error_code},
        )
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message

    def __str__(self) -> str:
        # cause(ClientError)의 메시지는 error_message와 같음
        return self.message

    @classmethod
    def from_client_error(cls, service: str, operation: str, client_error: BaseException) -> "APICallError":
        """botocore.exceptions.ClientError 래핑"""
        code, message = _client_error_info(client_error)
        return cls(service, operation, error_code=code, error_message=message, cause=client_error)


class ConfigError(TaggerError):
    """설정 오류"""

    def __init__(self, key: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"설정 오류 [{key}]: {message}", cause, details={"config_key": key})
        self.config_key = key


class FlowError(TaggerError):
    """레코드 처리 흐름 오류"""

    def __init__(self, step_name: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"플로우 오류 [{step_name}]: {message}", cause, details={"step_name": step_name})
        self.step_name = step_name


class RoutingError(FlowError):
    """이미 전달(transfer)된 레코드를 다시 라우팅하려는 경우"""

    def __init__(self, record_id: str, message: str):
        super().__init__("transfer", f"{record_id} - {message}")
        self.record_id = record_id
        self.details["record_id"] = record_id


# =============================================================================
# 판별 / 포맷팅
# =============================================================================


def error_code_of(error: BaseException) -> Optional[str]:
    """APICallError 또는 ClientError의 오류 코드 (없으면 None)"""
    if isinstance(error, APICallError):
        return error.error_code
    return _client_error_info(error)[0]


def is_not_found(error: BaseException) -> bool:
    return error_code_of(error) in NOT_FOUND_CODES


def is_access_denied(error: BaseException) -> bool:
    return error_code_of(error) in ACCESS_DENIED_CODES


def format_error_for_user(error: BaseException) -> str:
    """사용자에게 표시할 메시지

    알려진 오류 코드는 안내 문구로 바꾸고, 나머지는 원래 메시지를 사용합니다.
    """
    code = error_code_of(error)
    friendly = _FRIENDLY_MESSAGES.get(code) if code else None

    if isinstance(error, APICallError):
        return f"{error.service}.{error.operation}: {friendly}" if friendly else str(error)
    if isinstance(error, TaggerError):
        return str(error)
    if code:
        return friendly or f"{code}: {_client_error_info(error)[1]}"
    return str(error)
