import importlib

import pytest


ENTRYPOINTS = [
    "pxe",
]


@pytest.mark.parametrize("module_name", ENTRYPOINTS)
def test_entrypoint_help(module_name):
    module = importlib.import_module(module_name)
    assert hasattr(module, "main"), f"{module_name} missing main()"

    with pytest.raises(SystemExit) as excinfo:
        module.main(["--help"])

    assert excinfo.value.code == 0


@pytest.mark.parametrize("command", ["list", "apply", "combine", "histogram", "pipeline"])
def test_subcommand_help(command):
    import pxe

    with pytest.raises(SystemExit) as excinfo:
        pxe.main([command, "--help"])

    assert excinfo.value.code == 0
