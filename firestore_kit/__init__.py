"""
firestore_kit
-------------

Firebase CLI 기반 Firestore 프로비저닝 CLI 패키지.
로그인 확인, 보안 규칙/인덱스 배포, 시드 스크립트 의존성 설치,
(선택) 테스트 데이터 시드를 정해진 순서대로 실행하고 첫 실패에서 멈춘다.
"""

__all__ = [
    "config",
    "orchestrator",
]
