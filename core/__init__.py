# core/__init__.py
"""
core - s3-object-tagger 인프라

태깅 처리기가 사용하는 공통 인프라 패키지입니다.

아키텍처:
    core/
    ├── flow/           # 레코드, 세션(라우팅), 프로퍼티
    ├── client.py       # boto3 client 생성 (retry/timeout)
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, get_default_region
    region = get_default_region()  # "ap-northeast-2"

    # 예외 처리
    from core.exceptions import APICallError, is_not_found
    try:
        store.get_tags(bucket, key)
    except APICallError as e:
        if is_not_found(e):
            print("객체가 없습니다")
"""
