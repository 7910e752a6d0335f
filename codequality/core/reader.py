"""
Builds the code model of one module from raw binary metadata.

The build runs three stages, each completing before the next starts:

1. skeleton  - namespaces and types (ModelBuilder)
2. members   - fields, events, methods (MemberPopulator)
3. usage     - type/method/field use edges (UsageResolver)

The build is all-or-nothing: any failure in stages 1-2 (or an unexpected
error in stage 3) aborts it with ModelBuildError and no module is
returned. Resolution misses are not failures.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from ..config import BuilderConfig, get_config
from ..errors import ModelBuildError
from ..metadata.raw import RawInstruction, RawModule
from .builder import ModelBuilder
from .entities import Method, Module
from .populator import MemberPopulator
from .registry import TypeRegistry
from .resolver import UsageResolver


logger = logging.getLogger(__name__)


class MetricsReader:
    """
    Reads raw module metadata into a Module graph for metric calculation.

    Attributes:
        config: Build settings
        main_module: Module produced by the last successful read_module call
    """

    def __init__(self, config: Optional[BuilderConfig] = None):
        self.config = config or get_config()
        self.config.validate()
        self.main_module: Optional[Module] = None

    def read_module(self, raw_module: RawModule) -> Module:
        """
        Build the complete model of a module.

        Args:
            raw_module: Decoded module from the binary reader

        Returns:
            Fully built Module with usage edges

        Raises:
            ModelBuildError: If construction fails; nothing is published
        """
        module = Module(name=raw_module.name)
        registry = TypeRegistry(module, no_namespace=self.config.no_namespace)
        resolver = UsageResolver(registry)
        pending: List[Tuple[Method, List[RawInstruction]]] = []

        def defer(method: Method, body: List[RawInstruction]) -> None:
            pending.append((method, body))

        on_body = defer if self.config.max_workers > 1 else resolver.resolve

        logger.info("Reading module %s (%d top-level types)",
                    raw_module.name, len(raw_module.types))

        try:
            ModelBuilder(registry, self.config.module_type_name).build(raw_module.types)
            MemberPopulator(registry, on_body, self.config.module_type_name).populate(
                raw_module.types
            )
            if pending:
                self._resolve_parallel(resolver, pending)
        except ModelBuildError as e:
            logger.error("Build of module %s aborted: %s", raw_module.name, e)
            raise
        except Exception as e:
            logger.error("Build of module %s aborted: %s", raw_module.name, e)
            raise ModelBuildError(f"Failed to build module '{raw_module.name}': {e}") from e

        stats = module.statistics()
        logger.info(
            "Built module %s: %d namespaces, %d types, %d methods, "
            "%d type uses, %d method uses, %d field uses",
            module.name, stats["namespaces"], stats["types"], stats["methods"],
            stats["type_uses"], stats["method_uses"], stats["field_uses"]
        )

        self.main_module = module
        return module

    def _resolve_parallel(self, resolver: UsageResolver,
                          pending: List[Tuple[Method, List[RawInstruction]]]) -> None:
        """
        Run the usage stage on a thread pool.

        Each method is handed to exactly one worker, so its edge sets have
        a single writer; the registry is only read at this point.
        """
        logger.info("Resolving %d method bodies on %d workers",
                    len(pending), self.config.max_workers)
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            futures = [pool.submit(resolver.resolve, method, body)
                       for method, body in pending]
            for future in futures:
                future.result()


def build_module(raw_module: RawModule, config: Optional[BuilderConfig] = None) -> Module:
    """
    Build a Module from raw metadata.

    Args:
        raw_module: Decoded module from the binary reader
        config: Build settings (environment config when None)

    Returns:
        Populated Module
    """
    return MetricsReader(config).read_module(raw_module)
