"""End-to-end generation: XML text -> Node tree -> generation model -> source units"""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from .builder import InterfaceModelBuilder
from .config import ErrorPolicy, GenerationConfig
from .diagnostics import Diagnostics
from .logging import get_logger
from .model import GenerationModel
from .parser import IntrospectionParser
from .python_generator import GeneratedUnit, ProxyGenerator

logger = get_logger("pipeline")


@dataclass(frozen=True)
class GenerationResult:
    units: tuple
    model: GenerationModel
    diagnostics: Diagnostics

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_errors

    def unit(self, name: str) -> Optional[GeneratedUnit]:
        return next((u for u in self.units if u.name == name), None)


def generate(content: Union[str, bytes], config: Optional[GenerationConfig] = None, *,
             source: Optional[str] = None,
             formatter: Optional[Callable[[str], str]] = None) -> GenerationResult:
    """Run the whole pipeline over one introspection document.

    Malformed XML raises ParseError. Interface-local failures are collected
    in the result's diagnostics unless the error policy is FAIL_FAST, in
    which case the first one is raised.
    """
    config = config or GenerationConfig()
    diagnostics = Diagnostics()
    collect = config.errors is ErrorPolicy.COLLECT

    node = IntrospectionParser(content, diagnostics if collect else None).parse()
    model = InterfaceModelBuilder(config, diagnostics if collect else None).build(node, source)
    units = ProxyGenerator(model, config, formatter).generate()

    logger.info("Generated %d unit(s) for %d interface(s), skipped %d standard interface(s)",
                len(units), len(model.interfaces), len(model.standard_interfaces))
    return GenerationResult(units=tuple(units), model=model, diagnostics=diagnostics)
