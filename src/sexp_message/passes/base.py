"""
Base Pass System and Extension Registry

Rust Pattern: rustc_expand::base::SyntaxExtension, rustc_mir::transform::MirPass

An expander is a plain function `(location, payload, ctx) -> Expression`.
It is wrapped in an ExtensionPoint that fixes its name and the payload shape
it accepts, and extension points are grouped under a named transformation in
a TransformationRegistry owned by one compiler driver.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Type
import logging

from ..shared import (
    Expression, Program, SourceLocation, ErrorReporter, ErrorCode,
    SexpMessageSourceError, SexpMessageImplementationError,
)

logger = logging.getLogger("sexp_message.passes.base")


class ExtensionContext(Enum):
    """Syntactic position an extension point may be used in."""
    EXPRESSION = "expression"


class PayloadShape(Enum):
    """Accepted payloads: `[%name]` and `[%name e]`, or only `[%name]`."""
    OPTIONAL_EXPRESSION = "optional_expression"
    EMPTY = "empty"


Expander = Callable[[SourceLocation, Optional[Expression], "ExpansionContext"], Expression]


@dataclass(frozen=True)
class ExtensionPoint:
    """
    A named extension and the expander invoked for it.

    Rust Pattern: rustc_expand::base::SyntaxExtension
    """
    name: str
    context: ExtensionContext
    payload_shape: PayloadShape
    expander: Expander

    @classmethod
    def declare(cls, name: str, context: ExtensionContext, payload_shape: PayloadShape,
                expander: Expander) -> "ExtensionPoint":
        return cls(name, context, payload_shape, expander)

    def check_payload(self, location: SourceLocation, payload: Optional[Expression]) -> None:
        """Reject a payload that does not have this extension's shape."""
        if self.payload_shape is PayloadShape.EMPTY and payload is not None:
            raise SexpMessageSourceError(
                f"[%{self.name}] takes no payload",
                location,
                error_code=ErrorCode.INVALID_PAYLOAD.value,
                help=f"write [%{self.name}]",
            )

    def expand(self, location: SourceLocation, payload: Optional[Expression],
               ctx: "ExpansionContext") -> Expression:
        self.check_payload(location, payload)
        return self.expander(location, payload, ctx)


@dataclass
class Transformation:
    """Named group of extension points registered together."""
    name: str
    extensions: List[ExtensionPoint] = field(default_factory=list)


class TransformationRegistry:
    """
    Extension-transformation registry.

    Transformation names and extension names are both unique; a duplicate
    registration is an implementation error rather than a silent override.
    """

    def __init__(self) -> None:
        self._transformations: Dict[str, Transformation] = {}
        self._extensions: Dict[str, ExtensionPoint] = {}

    def register_transformation(self, name: str, extensions: Optional[List[ExtensionPoint]] = None) -> Transformation:
        if name in self._transformations:
            raise SexpMessageImplementationError(f"transformation '{name}' is already registered")
        extensions = list(extensions or [])
        for ext in extensions:
            if ext.name in self._extensions:
                raise SexpMessageImplementationError(
                    f"extension '{ext.name}' is already registered by another transformation"
                )
        transformation = Transformation(name, extensions)
        self._transformations[name] = transformation
        for ext in extensions:
            self._extensions[ext.name] = ext
        logger.debug(f"Registered transformation '{name}' with extensions {[e.name for e in extensions]}")
        return transformation

    def lookup_extension(self, name: str) -> Optional[ExtensionPoint]:
        return self._extensions.get(name)

    def transformation_names(self) -> List[str]:
        return list(self._transformations)

    def extension_names(self) -> List[str]:
        return list(self._extensions)


def default_registry() -> TransformationRegistry:
    """Fresh registry holding the `sexp_message` and `here` transformations."""
    from . import here, sexp_message

    registry = TransformationRegistry()
    sexp_message.register(registry)
    here.register(registry)
    return registry


class ExpansionContext:
    """
    Expansion context (Rust naming: rustc_expand::base::ExtCtxt).

    Carries everything an expander may consult besides its own payload: the
    error reporter, the source files, the registry, and the injected
    collaborators (type-directed resolver, source printer, position lifter).
    One context serves one compilation; expanders keep no state in it.
    """

    def __init__(
        self,
        registry: Optional[TransformationRegistry] = None,
        source_files: Optional[Dict[str, str]] = None,
        type_resolver: Optional[Callable] = None,
        printer: Optional[Callable] = None,
        position_lifter: Optional[Callable] = None,
    ):
        from ..frontend.printer import string_of_expression
        from .here import lift_position_as_string
        from .sexp_of_type import sexp_of_core_type

        self.registry = registry if registry is not None else default_registry()
        self.source_files: Dict[str, str] = source_files if source_files is not None else {}
        self.reporter: ErrorReporter = ErrorReporter(self.source_files)
        self.type_resolver = type_resolver or sexp_of_core_type
        self.printer = printer or string_of_expression
        self.position_lifter = position_lifter or lift_position_as_string


class BasePass(ABC):
    """
    Base class for all passes over a Program.

    Rust Pattern: rustc_mir::transform::MirPass
    """
    requires: List[Type['BasePass']] = []

    @abstractmethod
    def run(self, program: Program, ctx: ExpansionContext) -> Program:
        """Return the new Program; the input tree is not mutated."""
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    Rust Pattern: rustc driver with pass scheduling
    """

    def __init__(self) -> None:
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], Set[Type[BasePass]]] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, program: Program, ctx: ExpansionContext) -> Program:
        for pass_class in self._topological_sort():
            logger.debug(f"Running {pass_class.__name__}")
            program = pass_class().run(program, ctx)
        return program

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        in_degree = {p: len(self._dependency_graph[p]) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)

            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise SexpMessageImplementationError("Circular dependency detected in passes")

        return result
