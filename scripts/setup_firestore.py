#!/usr/bin/env python3
"""
프로젝트 루트의 scripts/ 에 두고 실행하는 런처.

어느 디렉토리에서 실행하든 이 파일의 부모 디렉토리(프로젝트 루트)를 기준으로
`firestore-setup run` 과 같은 동작을 한다. 인자는 run 서브커맨드로 전달된다.
"""

import sys

from firestore_kit.cli import main
from firestore_kit.paths import resolve_project_root


if __name__ == "__main__":
    root = resolve_project_root(__file__)
    main(args=["-C", root, "run", *sys.argv[1:]], prog_name="setup_firestore.py")
