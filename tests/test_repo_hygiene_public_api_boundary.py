"""单测：约束跨包依赖必须走“稳定 Public API”。

目标：
- 业务包/集成代码在依赖 `fiducial_target`、`tag_align` 时，只允许从其“稳定入口”导入。
- 防止下游直接依赖内部模块路径（例如 `fiducial_target.resolver` / `tag_align.poller`），
  否则一旦上游重构内部目录结构，集成侧会被非预期破坏。

说明：
- 该约束只针对“跨包”依赖：包自身可以导入其内部模块（例如在 `__init__.py` 中做重导出）。
- 少量 IO/入口边界模块（例如 `config_yaml`、`entry`）被明确作为稳定入口，在 allowlist 中放行。
"""

from __future__ import annotations

from pathlib import Path
import re


_ALLOWED_SUBMODULES = {
    "fiducial_target": {"config_yaml"},
    "tag_align": {"config_yaml", "entry"},
}


def _iter_python_files(repo_root: Path) -> list[Path]:
    """收集需要检查的 .py 文件（packages/**/src 与根 tests/）。"""

    patterns = [
        "packages/**/src/**/*.py",
        "tests/**/*.py",
    ]

    files: list[Path] = []
    for pat in patterns:
        files.extend(repo_root.glob(pat))

    # 去重 + 排序，保证失败输出稳定。
    uniq = sorted({p.resolve() for p in files})

    out: list[Path] = []
    for p in uniq:
        if "__pycache__" in p.parts:
            continue
        if any(part.endswith(".egg-info") for part in p.parts):
            continue
        out.append(p)

    return out


def _find_disallowed_imports(
    *,
    file_path: Path,
    package_name: str,
    allowed_submodules: set[str],
) -> list[str]:
    """返回该文件中命中的“禁止导入”行（原样文本，便于定位）。"""

    # 仅做简单行级匹配：目标是 repo hygiene，而非完整解析 Python AST。
    from_re = re.compile(rf"^\s*from\s+{re.escape(package_name)}\.(?P<seg>[A-Za-z_][A-Za-z0-9_]*)\b")
    import_re = re.compile(rf"^\s*import\s+{re.escape(package_name)}\.(?P<seg>[A-Za-z_][A-Za-z0-9_]*)\b")

    bad: list[str] = []
    text = file_path.read_text(encoding="utf-8")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        m = from_re.match(raw) or import_re.match(raw)
        if m and m.group("seg") not in allowed_submodules:
            bad.append(raw)

    return bad


def test_public_api_boundary_across_packages() -> None:
    """跨包只允许依赖稳定 Public API。"""

    repo_root = Path(__file__).resolve().parents[1]
    files = _iter_python_files(repo_root)
    assert files, "没有收集到任何源码文件"

    bad_msgs: list[str] = []

    for p in files:
        rel_posix = p.relative_to(repo_root).as_posix()

        for package_name, allowed in _ALLOWED_SUBMODULES.items():
            # 包内允许使用内部导入（它本身就是实现）。
            if rel_posix.startswith(f"packages/{package_name}/"):
                continue

            bad = _find_disallowed_imports(
                file_path=p,
                package_name=package_name,
                allowed_submodules=allowed,
            )
            if bad:
                bad_msgs.append("\n".join([f"- {rel_posix}", *[f"    {x}" for x in bad]]))

    assert bad_msgs == [], (
        "发现跨包依赖使用了内部模块路径；请改为从包顶层稳定入口导入：\n"
        + "\n".join(bad_msgs)
    )
