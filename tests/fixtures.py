# type: ignore
import pytest

from unit_utils import ScriptedConsole


@pytest.fixture
def with_console():
    yield ScriptedConsole()


@pytest.fixture
def with_input(request):
    yield ScriptedConsole(request.param)
