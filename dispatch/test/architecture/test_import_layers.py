from __future__ import annotations

import pytest

from ._gate import require_arch_checks_enabled
from ._utils import dispatch_root, iter_python_files, matches_prefix, parse_imports

LAYERS = {
    "core": ("dispatch.platform", "dispatch.output", "dispatch.github", "dispatch.gateway"),
    "platform": ("dispatch.output", "dispatch.github", "dispatch.gateway", "dispatch.cli"),
    "output": ("dispatch.github", "dispatch.gateway", "dispatch.cli"),
    "github": ("dispatch.gateway", "dispatch.cli"),
    "gateway": ("dispatch.cli",),
}


@pytest.mark.parametrize(("package", "forbidden"), sorted(LAYERS.items()))
def test_lower_layers_do_not_import_upper_layers(package: str, forbidden: tuple[str, ...]) -> None:
    require_arch_checks_enabled()

    root = dispatch_root()
    offenders: list[str] = []

    for file_path in iter_python_files(root / package):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, prefix) for prefix in forbidden):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, f"{package} layering violations:\n" + "\n".join(offenders)
