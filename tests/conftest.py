"""
Pytest configuration and shared fixtures for the sexp_message tests.

The compiler is stateless between compilations (fresh expansion context per
compile, registry built once per driver), so one instance is shared per
session; the parser's LALR table is cached by Lark on disk.
"""

import sys
import pytest
from typing import Dict, Any, Optional
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from sexp_message.compiler.driver import CompilerDriver
from sexp_message.frontend.parser import Parser
from sexp_message.passes.base import ExpansionContext
from sexp_message.runtime.runtime import SexpMessageRuntime


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_compiler():
    """Session-scoped compiler shared across all tests."""
    return CompilerDriver()


@pytest.fixture(scope="session")
def session_runtime():
    return SexpMessageRuntime()


@pytest.fixture(scope="session")
def parser():
    return Parser()


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def compiler(session_compiler):
    return session_compiler


@pytest.fixture
def runtime():
    """Fresh runtime per test."""
    return SexpMessageRuntime()


@pytest.fixture
def ctx():
    """Fresh expansion context with the default registry and collaborators."""
    return ExpansionContext()


@pytest.fixture
def parse_expr(parser):
    """Parse one expression of the message language."""
    def _parse(source: str, source_file: str = "test.sxm"):
        return parser.parse_expression(source, source_file)
    return _parse


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture(scope="session")
def compile_and_execute_factory(session_compiler, session_runtime):
    """
    Factory fixture that provides a compile_and_execute function.
    Uses session-scoped instances.
    """
    def _compile_and_execute(
        source_code: str,
        inputs: Optional[Dict[str, Any]] = None,
        source_file: Optional[str] = None,
        compiler: Optional[CompilerDriver] = None,
        runtime: Optional[SexpMessageRuntime] = None
    ):
        from tests.test_utils import run_compiled
        comp = compiler if compiler is not None else session_compiler
        rt = runtime if runtime is not None else session_runtime
        result = comp.compile(source_code, source_file if source_file is not None else "test.sxm")
        return run_compiled(result, rt, inputs)

    return _compile_and_execute


@pytest.fixture
def compile_and_execute(compile_and_execute_factory):
    return compile_and_execute_factory


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
