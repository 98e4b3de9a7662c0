import pytest

from conftest import HAS_GXX
from grader.core.errors import SandboxIOError
from grader.core.models import ErrorKind, RunStatus, SandboxResult, TestCase
from grader.runners.base import LanguageSpec
from grader.runners.registry import LanguageRegistry
from grader.services.evaluator import Evaluator

ECHO_PY = "print(input())\n"
LOOP_PY = "while True:\n    pass\n"

ECHO_CPP = """
#include <iostream>
#include <string>
int main() { std::string s; std::getline(std::cin, s); std::cout << s << std::endl; return 0; }
"""


def _eval(settings, code, language, cases):
    lang = LanguageRegistry.from_settings(settings).dispatch(language)
    return Evaluator(settings).evaluate(code, lang, cases)


def test_python_echo_passes(settings, temp_root):
    out = _eval(settings, ECHO_PY, "python", [TestCase("5", "5")])
    assert out.success
    assert out.report == "Test case 0: pass\nTest case count: 1/1\n"
    assert (out.total_tests, out.passed_tests) == (1, 1)
    assert list(temp_root.iterdir()) == []


def test_python_wrong_answer(settings):
    out = _eval(settings, ECHO_PY, "python", [TestCase("5", "6")])
    assert out.success
    assert out.report == "Test case 0: failed\nTest case count: 0/1\n"


def test_python_runtime_error_counts_as_failed(settings):
    out = _eval(settings, "raise ValueError('x')\n", "python", [TestCase("1", "1")])
    assert out.success
    assert out.passed_tests == 0


def test_python_infinite_loop_times_out(fast_settings, temp_root):
    cases = [TestCase("1", "1"), TestCase("2", "2")]
    out = _eval(fast_settings, LOOP_PY, "python", cases)
    assert not out.success
    assert out.report == "Time limit exceeded"
    assert out.total_tests is None and out.passed_tests is None
    assert out.error == ErrorKind.EXECUTION_TIMEOUT
    assert list(temp_root.iterdir()) == []


def test_same_input_is_deterministic(settings):
    cases = [TestCase("7", "7"), TestCase("8", "9")]
    a = _eval(settings, ECHO_PY, "python", cases)
    b = _eval(settings, ECHO_PY, "python", cases)
    assert a == b


class RecordingSandbox:
    def __init__(self, compile_result):
        self.compile_result = compile_result
        self.calls = []

    def run(self, cmd, stdin=None, timeout_s=5, cwd=None, env=None):
        self.calls.append(cmd)
        return self.compile_result


FAKE_CPP = LanguageSpec(
    name="cpp",
    extension=".cpp",
    compile_argv=["cc", "{source}", "-o", "{artifact}"],
    run_argv=["{artifact}"],
)


def test_compile_error_runs_no_tests(settings, temp_root):
    sbx = RecordingSandbox(SandboxResult(RunStatus.FINISHED, 1, "", "main.cpp:1: error: expected ';'", 0.1))
    out = Evaluator(settings, sandbox=sbx).evaluate("int main(", FAKE_CPP, [TestCase("1", "1")])
    assert not out.success
    assert out.report == "Compilation error: main.cpp:1: error: expected ';'"
    assert out.error == ErrorKind.COMPILE_ERROR
    assert out.total_tests is None
    assert len(sbx.calls) == 1
    assert list(temp_root.iterdir()) == []


def test_compile_timeout(settings, temp_root):
    sbx = RecordingSandbox(SandboxResult(RunStatus.TIMED_OUT, None, "", "", 5))
    out = Evaluator(settings, sandbox=sbx).evaluate("int main(){}", FAKE_CPP, [TestCase("1", "1")])
    assert out.report == "Compilation time limit exceeded"
    assert out.error == ErrorKind.COMPILE_TIMEOUT
    assert len(sbx.calls) == 1
    assert list(temp_root.iterdir()) == []


def test_sandbox_io_error_becomes_outcome(settings, temp_root):
    class BrokenSandbox:
        def run(self, *a, **kw):
            raise SandboxIOError("cannot start python: no such file")

    lang = LanguageRegistry.from_settings(settings).dispatch("python")
    out = Evaluator(settings, sandbox=BrokenSandbox()).evaluate(ECHO_PY, lang, [TestCase("1", "1")])
    assert not out.success
    assert out.report == "Error: cannot start python: no such file"
    assert out.error == ErrorKind.SANDBOX_IO_ERROR
    assert out.total_tests is None and out.passed_tests is None
    assert list(temp_root.iterdir()) == []


def test_missing_interpreter_is_io_error(settings):
    s = settings.model_copy(update={"python_bin": "/nonexistent/python"})
    out = _eval(s, ECHO_PY, "python", [TestCase("1", "1")])
    assert out.error == ErrorKind.SANDBOX_IO_ERROR
    assert out.report.startswith("Error: ")


@pytest.mark.skipif(not HAS_GXX, reason="g++ not available")
def test_cpp_echo_passes(settings, temp_root):
    cases = [TestCase("5", "5"), TestCase("hello", "bye")]
    out = _eval(settings, ECHO_CPP, "cpp", cases)
    assert out.success
    assert out.report == "Test case 0: pass\nTest case 1: failed\nTest case count: 1/2\n"
    assert list(temp_root.iterdir()) == []


@pytest.mark.skipif(not HAS_GXX, reason="g++ not available")
def test_cpp_syntax_error(settings, temp_root):
    out = _eval(settings, "int main( { return 0 }", "cpp", [TestCase("1", "1")])
    assert not out.success
    assert "Compilation error:" in out.report
    assert list(temp_root.iterdir()) == []


def test_unencodable_source_is_io_error(settings, temp_root):
    out = _eval(settings, "print('\ud800')\n", "python", [TestCase("1", "1")])
    assert not out.success
    assert out.error == ErrorKind.SANDBOX_IO_ERROR
    assert out.report.startswith("Error: cannot write source file")
    assert out.total_tests is None and out.passed_tests is None
    assert list(temp_root.iterdir()) == []
