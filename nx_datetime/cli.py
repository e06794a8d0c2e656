from __future__ import annotations

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from .codegen import get_generator
from .codegen.core.config import GeneratorConfig
from .codegen.core.discovery import DiscoveryError
from .codegen.core.output import is_up_to_date, unit_path, write_units
from .codegen.core.processor import ProcessingResult, process_manifest, process_sources
from .codegen.core.schema import Severity
from .logging_config import get_logger
from .utils import iter_source_files

logger = get_logger(__name__)

SYNTAX_LEXERS = {"python": "python", "kotlin": "kotlin"}


class CLIHandler:
    """Handle command-line interface (CLI) operations for accessor generation."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console to print to.
        """
        self.console = console or Console()
        logger.debug("CLIHandler initialized")

    def run(
        self,
        args: Any,
        language: str,
        config: GeneratorConfig,
        manifest: tuple[str, Any] | None = None,
    ) -> int:
        """Run one generation pass based on parsed arguments.

        Args:
            args: Parsed CLI arguments (from the ``generate`` subparser).
            language: Primary target language name.
            config: Merged generator configuration.
            manifest: ``(source, data)`` of a loaded JSON manifest, if any.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        generator = get_generator(language, config)

        try:
            result = self._process(args, generator, config, manifest)
        except DiscoveryError as e:
            self.console.print(f"❌ [red]{e}[/red]")
            logger.error("Manifest rejected: %s", e)
            return 1

        if not result.success:
            self.console.print(f"❌ [red]{result.error_message}[/red]")
            if result.exception:
                self.console.print(f"[dim]Details: {result.exception}[/dim]")
            return 1

        self._print_diagnostics(result)

        exit_code = 0
        if getattr(args, "dry_run", False):
            self._preview(result, language)
        elif getattr(args, "check", False):
            exit_code = self._check(result, config)
        else:
            self._write(result, config)

        if getattr(args, "verbose", False):
            self._print_metadata(result)

        if result.errors and not getattr(args, "allow_errors", False):
            logger.info("Finished with %d error(s)", len(result.errors))
            return 1
        return exit_code

    def _process(
        self,
        args: Any,
        generator: Any,
        config: GeneratorConfig,
        manifest: tuple[str, Any] | None,
    ) -> ProcessingResult:
        if manifest is not None:
            source, data = manifest
            self.console.print(f"📄 Loaded: {source}")
            return process_manifest(data, source_path=source, generator=generator)

        paths = list(iter_source_files(args.sources, exclude_suffix=config.unit_suffix))
        self.console.print(f"📄 Scanning {len(paths)} source file(s)")
        logger.info("Scanning %d source file(s)", len(paths))
        return process_sources(paths, generator=generator)

    def _print_diagnostics(self, result: ProcessingResult) -> None:
        if not result.diagnostics:
            return

        table = Table(title="Diagnostics", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Severity")
        table.add_column("Code", style="bold")
        table.add_column("Location", style="dim")
        table.add_column("Message")

        for diagnostic in result.diagnostics:
            style = "red" if diagnostic.severity == Severity.ERROR else "yellow"
            table.add_row(
                f"[{style}]{diagnostic.severity.value}[/{style}]",
                diagnostic.code,
                diagnostic.location,
                diagnostic.message,
            )

        self.console.print(table)

    def _write(self, result: ProcessingResult, config: GeneratorConfig) -> None:
        written = write_units(result.units, config.output_dir)
        if not written:
            self.console.print("[yellow]No marked declarations found.[/yellow]")
            return

        table = Table(title="Generated Units", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("Declaration", style="bold green")
        table.add_column("File", style="cyan")
        table.add_column("Accessors", justify="right")
        table.add_column("Status")

        for item in written:
            table.add_row(
                item.unit.declaration,
                item.path.as_posix(),
                str(len(item.unit.accessor_names)),
                "written" if item.changed else "[dim]unchanged[/dim]",
            )

        self.console.print(table)
        changed = sum(1 for item in written if item.changed)
        self.console.print(f"✅ [green]{changed} of {len(written)} unit(s) written[/green]")

    def _preview(self, result: ProcessingResult, language: str) -> None:
        for unit in result.units:
            self.console.print(f"\n[bold cyan]── {unit.relative_path.as_posix()} ──[/bold cyan]")
            self.console.print(Syntax(unit.code, SYNTAX_LEXERS.get(language, language), theme="monokai"))

    def _check(self, result: ProcessingResult, config: GeneratorConfig) -> int:
        stale = []
        for unit in result.units:
            path = unit_path(unit, config.output_dir)
            if not path.exists():
                stale.append((path, "missing"))
            elif not is_up_to_date(path, unit.source_digest):
                stale.append((path, "source changed"))
            elif Path(path).read_text(encoding="utf-8") != unit.code:
                stale.append((path, "content differs"))

        for path, reason in stale:
            self.console.print(f"❌ [red]{path.as_posix()}: {reason}[/red]", soft_wrap=True)

        if stale:
            logger.info("%d stale unit(s)", len(stale))
            return 1

        self.console.print(f"✅ [green]{len(result.units)} unit(s) up to date[/green]")
        return 0

    def _print_metadata(self, result: ProcessingResult) -> None:
        table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Property", style="bold")
        table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            table.add_row(key.replace("_", " ").title(), str(value))

        self.console.print(table)
