from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest


@pytest.mark.integration
# - src/ だけを sys.path に置いた新しいインタプリタで公開 API が解決できること。
#   親プロセスの sys.modules を汚さないようサブプロセスで実行する。
def test_src_layout_imports_in_fresh_interpreter():
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    script = (
        "import sys, importlib\n"
        f"sys.path.insert(0, r'{src_dir}')\n"
        "m = importlib.import_module('api')\n"
        "assert hasattr(m, 'Mat4x4') and hasattr(m, 'Scene') and hasattr(m, 'Vec3')\n"
        "importlib.import_module('engine.render.uniforms')\n"
    )
    proc = subprocess.run([sys.executable, "-c", script], capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
