from __future__ import annotations

import os


def resolve_project_root(anchor: str) -> str:
    """
    anchor 파일이 들어있는 디렉토리의 부모를 프로젝트 루트로 돌려준다.

    scripts/setup_firestore.py 처럼 루트 바로 아래 디렉토리에 놓인 런처가
    자신의 __file__ 을 넘기는 용도. 호출 시점의 cwd 와 무관하게 항상 같은 경로가 나온다.
    """
    here = os.path.dirname(os.path.abspath(anchor))
    return os.path.realpath(os.path.join(here, os.pardir))


def root_from_option(chdir: str | None, env_root: str | None) -> str:
    """
    CLI 용: -C 옵션 > PROJECT_ROOT > 현재 디렉토리 순으로 루트를 정한다.

    마지막 단계는 cwd 에 의존하므로, cwd 와 무관한 루트가 필요하면
    scripts/setup_firestore.py 런처(resolve_project_root)를 쓴다.
    """
    for candidate in (chdir, env_root):
        if candidate:
            return os.path.realpath(candidate)
    return os.path.realpath(os.getcwd())
