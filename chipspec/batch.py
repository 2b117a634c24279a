"""
Batch processing of device and configuration documents.

``BatchRunner`` checks every device and resolves every option, collecting
all diagnostics into one ``BatchReport`` instead of stopping at the first
failure. A ``SchemaError`` only aborts the document it came from.

Devices and options are independent of each other, so with ``max_workers``
the per-entity work runs on a thread pool. Results are merged in input
order, which keeps reports deterministic.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from chipspec.config import (
    ConfigDocument,
    ConfigOption,
    ConstraintValidator,
    OptionResolver,
    Resolution,
    ResolutionStatus,
    collect_overrides,
)
from chipspec.errors import BatchError, DiagnosticKind, Diagnostics, SchemaError
from chipspec.expr import ConditionEvaluator, FeatureContext
from chipspec.model import Device, check_device
from chipspec.parser import ConfigParser, DeviceParser

logger = logging.getLogger(__name__)

# A document is either a path to load or an already parsed (source, tree) pair
DocumentInput = Union[str, Path, Tuple[str, Any]]

T = TypeVar("T")
R = TypeVar("R")


def option_key(crate: Optional[str], name: str) -> str:
    """Report key of an option: ``crate:name``, or the bare name without a crate."""
    return f"{crate}:{name}" if crate else name


@dataclass
class BatchReport:
    """Aggregated outcome of a batch run."""

    devices: Dict[str, Device] = field(default_factory=dict)
    options: Dict[str, Resolution] = field(default_factory=dict)
    inactive: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.errors

    def errors_for(self, entity: str) -> List[Any]:
        return [d for d in self.diagnostics.errors if d.entity == entity]

    def values(self, crate: Optional[str] = None) -> Dict[str, Any]:
        """Resolved option values by report key, or by option name for one ``crate``."""
        if crate is None:
            return {key: res.value for key, res in self.options.items()}
        prefix = option_key(crate, "")
        return {
            key[len(prefix):]: res.value
            for key, res in self.options.items()
            if key.startswith(prefix)
        }

    def unstable_options(self) -> List[str]:
        """Report keys of resolved options whose interface is not finalized."""
        return [key for key, res in self.options.items() if res.is_unstable]

    def merge(self, other: "BatchReport") -> None:
        self.devices.update(other.devices)
        self.options.update(other.options)
        self.inactive.extend(other.inactive)
        self.failed.extend(other.failed)
        self.diagnostics.extend(other.diagnostics)

    def raise_for_errors(self) -> None:
        """Raise ``BatchError`` if any error was collected."""
        if not self.ok:
            raise BatchError(self, self.diagnostics.errors)

    def summary(self) -> str:
        """Get human-readable summary."""
        lines = [
            f"{len(self.devices)} device(s) checked, "
            f"{len(self.options)} option(s) resolved, {len(self.inactive)} inactive, "
            f"{len(self.failed)} failed"
        ]

        errors = self.diagnostics.errors
        warnings = self.diagnostics.warnings
        if errors:
            lines.append(f"\n{len(errors)} Error(s):")
            lines.extend(f"  {d.format()}" for d in errors)
        if warnings:
            lines.append(f"\n{len(warnings)} Warning(s):")
            lines.extend(f"  {d.format()}" for d in warnings)
        unstable = self.unstable_options()
        if unstable:
            lines.append(f"\nUnstable option(s): {', '.join(unstable)}")
        if not errors:
            lines.append("\nAll checks passed")

        return "\n".join(lines)


class BatchRunner:
    """
    Drives consistency checks and option resolution over many documents.

    Unknown predicates and unknown validator kinds are tooling bugs and
    propagate as exceptions; everything else ends up in the report.
    """

    def __init__(
        self,
        context: Optional[FeatureContext] = None,
        evaluator: Optional[ConditionEvaluator] = None,
        validator: Optional[ConstraintValidator] = None,
        max_workers: Optional[int] = None,
    ):
        self.context = context or FeatureContext()
        self.resolver = OptionResolver(evaluator, validator)
        self.max_workers = max_workers

    def _map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        if self.max_workers and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return list(pool.map(func, items))
        return [func(item) for item in items]

    @staticmethod
    def _load(document: DocumentInput, parser: Any) -> Any:
        """Return the parsed model; raises SchemaError."""
        if isinstance(document, (str, Path)):
            return parser.parse_file(document)
        _, tree = document
        return parser.parse_data(tree)

    @staticmethod
    def _schema_diagnostic(diagnostics: Diagnostics, source: str, error: SchemaError) -> None:
        diagnostics.add(
            DiagnosticKind.SCHEMA,
            source,
            error.field_path or "<document>",
            str(error),
        )

    # --- Devices ---

    def check_device_document(
        self, document: DocumentInput
    ) -> Tuple[Optional[Device], Diagnostics]:
        """Parse and check one device document."""
        diagnostics = Diagnostics()
        source = document if isinstance(document, (str, Path)) else document[0]
        try:
            device = self._load(document, DeviceParser())
        except SchemaError as e:
            logger.warning("Skipping device document %s: %s", source, e.reason)
            self._schema_diagnostic(diagnostics, str(source), e)
            return None, diagnostics
        check_device(device, diagnostics)
        return device, diagnostics

    def check_devices(self, documents: Iterable[DocumentInput]) -> BatchReport:
        report = BatchReport()
        for device, diagnostics in self._map(self.check_device_document, list(documents)):
            report.diagnostics.extend(diagnostics)
            if device is None:
                continue
            if device.name in report.devices:
                report.diagnostics.add(
                    DiagnosticKind.DUPLICATE,
                    device.name,
                    "device.name",
                    f"Device '{device.name}' is defined by more than one document",
                    value=device.name,
                )
                continue
            report.devices[device.name] = device
        return report

    # --- Options ---

    def resolve_option(self, option: ConfigOption, override: Any = None) -> Resolution:
        return self.resolver.resolve(option, self.context, override)

    def resolve_options(
        self,
        document: ConfigDocument,
        environ: Optional[Mapping[str, str]] = None,
        report: Optional[BatchReport] = None,
    ) -> BatchReport:
        """Resolve every option of an already parsed document."""
        report = report if report is not None else BatchReport()
        overrides = collect_overrides(document, environ or {}, report.diagnostics)

        unique = []
        seen = set(report.options) | set(report.inactive) | set(report.failed)
        for option in document.options:
            key = option_key(document.crate, option.name)
            if key in seen:
                report.diagnostics.add(
                    DiagnosticKind.DUPLICATE,
                    key,
                    "name",
                    f"Option '{option.name}' is declared more than once",
                    value=option.name,
                )
                continue
            seen.add(key)
            unique.append(option)
            if not option.has_unconditional_default:
                report.diagnostics.add(
                    DiagnosticKind.UNRESOLVED_DEFAULT,
                    key,
                    "default",
                    "No unconditional default; resolution fails when no condition holds",
                    severity="warning",
                )

        resolutions = self._map(
            lambda option: self.resolve_option(option, overrides.get(option.name)), unique
        )
        for resolution in resolutions:
            report.diagnostics.extend(resolution.diagnostics)
            key = option_key(document.crate, resolution.option)
            if resolution.status == ResolutionStatus.RESOLVED:
                report.options[key] = resolution
            elif resolution.status == ResolutionStatus.INACTIVE:
                report.inactive.append(key)
            else:
                report.failed.append(key)
        return report

    def resolve_document(
        self,
        document: DocumentInput,
        environ: Optional[Mapping[str, str]] = None,
        report: Optional[BatchReport] = None,
    ) -> BatchReport:
        """Parse and resolve one configuration document."""
        report = report if report is not None else BatchReport()
        source = document if isinstance(document, (str, Path)) else document[0]
        try:
            config = self._load(document, ConfigParser())
        except SchemaError as e:
            logger.warning("Skipping config document %s: %s", source, e.reason)
            self._schema_diagnostic(report.diagnostics, str(source), e)
            return report
        return self.resolve_options(config, environ, report)

    # --- Everything ---

    def run(
        self,
        devices: Iterable[DocumentInput] = (),
        configs: Iterable[DocumentInput] = (),
        environ: Optional[Mapping[str, str]] = None,
    ) -> BatchReport:
        """Check all device documents and resolve all configuration documents."""
        report = self.check_devices(devices)
        for document in configs:
            self.resolve_document(document, environ, report)

        logger.info(
            "Batch finished: %d device(s), %d option(s), %d error(s)",
            len(report.devices),
            len(report.options),
            len(report.diagnostics.errors),
        )
        return report
