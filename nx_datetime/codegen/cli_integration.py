"""
CLI integration for accessor generation.

Provides the ``generate`` subcommand and the language information commands.
"""

import argparse
from typing import Any, Dict, Optional, Tuple

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from . import get_generator, list_supported_languages
from .registry import get_language_info, get_registry, list_all_language_info
from .core.config import ConfigError, GeneratorConfig, get_config_manager, load_config
from nx_datetime.logging_config import get_logger
from nx_datetime.utils import JSONLoaderError, load_json

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    For use with: nx-datetime generate [options] SOURCES...

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate date/time accessors",
        description="Generate date/time accessors for classes marked with @datetime_extension",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nx-datetime generate app/models.py
  nx-datetime generate src/ --output-dir generated
  nx-datetime generate --manifest declarations.json --language kotlin
  nx-datetime generate --list-languages
  nx-datetime generate --language-info kotlin
        """.strip(),
    )

    # Input options
    parser.add_argument(
        "sources", nargs="*", help="Python files or directories to scan"
    )
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("--manifest", metavar="FILE", help="JSON declaration manifest")
    input_group.add_argument("--url", help="URL to fetch a JSON manifest from")

    # Core generation options
    parser.add_argument(
        "--language", "-l", default="python", help="Target language (default: python)"
    )
    parser.add_argument(
        "--output-dir", "-o", metavar="DIR",
        help="Write units below DIR (default: next to each source)",
    )
    parser.add_argument("--config", metavar="FILE", help="Configuration file path (JSON)")

    # Naming options
    naming_group = parser.add_argument_group("naming")
    naming_group.add_argument("--suffix", metavar="S", help="Unit file name suffix")
    naming_group.add_argument(
        "--lower-family-labels",
        action="store_true",
        help="Use string_/date_ instead of String_/Date_ in accessor names",
    )
    naming_group.add_argument(
        "--helper-module", metavar="MODULE", help="Module/package providing the helpers"
    )
    naming_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't add docstrings to generated accessors",
    )

    # Run modes
    mode_group = parser.add_argument_group("run modes")
    mode_group.add_argument(
        "--dry-run", action="store_true", help="Print units instead of writing them"
    )
    mode_group.add_argument(
        "--check",
        action="store_true",
        help="Fail if any unit on disk is missing or out of date; write nothing",
    )
    mode_group.add_argument(
        "--allow-errors",
        action="store_true",
        help="Exit 0 even if some fields were rejected",
    )
    mode_group.add_argument(
        "--verbose", action="store_true", help="Show generation result metadata"
    )

    # Informational commands
    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported languages and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed info about a language and exit",
    )

    parser.set_defaults(func=handle_generate_command)
    return parser


def handle_generate_command(args: argparse.Namespace) -> int:
    """
    Handle the generate subcommand.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from nx_datetime.cli import CLIHandler

    try:
        # Handle info commands
        if args.list_languages:
            return _list_languages()

        if args.language_info:
            return _show_language_info(args.language_info)

        if not _validate_language(args.language):
            return 1

        if not (args.sources or args.manifest or args.url):
            raise CLIError("Input required: SOURCES, --manifest or --url")
        if args.sources and (args.manifest or args.url):
            raise CLIError("SOURCES can't be combined with --manifest or --url")

        language = get_registry().resolve_language(args.language)
        config = _build_config(args, language)
        manifest = _load_manifest(args)

        handler = CLIHandler(console=console)
        return handler.run(args, language, config, manifest=manifest)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        logger.error("%s", e)
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No accessor generators available[/yellow]")
        return 0

    # Create a rich table
    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = (
            ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        )

        table.add_row(
            f"🔧 {lang_name}", info["file_extension"], info["class"], aliases
        )

    console.print()
    console.print(table)
    console.print()

    # Add usage hint
    console.print(
        Panel(
            "[bold]Usage:[/bold] nx-datetime generate [dim]models.py[/dim] --language [cyan]LANGUAGE[/cyan]\n"
            "[bold]Info:[/bold] nx-datetime generate --language-info [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )

    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(language, silent=True):
        console.print(f"[red]✗ Language '{language}' is not supported[/red]")
        console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    info = get_language_info(language)

    # Create main info panel
    info_text = f"""[bold]Language:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}
[bold]Example Unit:[/bold] {info['example_file']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(
            info_text,
            title=f"🔧 {info['name'].title()} Generator",
            border_style="green",
        )
    )

    generator = get_generator(language)

    # Create configuration table
    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )

    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    config_table.add_row("Unit Suffix", generator.config.unit_suffix)
    config_table.add_row("Unit Name Case", generator.config.unit_name_case)
    config_table.add_row("Family Labels", generator.config.family_label_case)
    config_table.add_row("Helper Module", generator.config.helper_module)
    config_table.add_row("Indent Size", str(generator.config.indent_size))
    config_table.add_row("Add Comments", str(generator.config.add_comments))
    for key, value in sorted(generator.config.language_config.items()):
        config_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(config_table)

    # Add examples panel
    examples_text = f"""Generate next to the sources:
[cyan]nx-datetime generate --language {language} models.py[/cyan]

Generate into a directory:
[cyan]nx-datetime generate -l {language} -o generated src/[/cyan]

Preview without writing:
[cyan]nx-datetime generate -l {language} --dry-run models.py[/cyan]"""

    console.print()
    console.print(
        Panel(examples_text, title="💡 Usage Examples", border_style="blue")
    )

    return 0


def _validate_language(language: str, silent: bool = False) -> bool:
    """Validate that a language is supported."""
    if not get_registry().is_supported(language):
        if not silent:
            supported = list_supported_languages()
            console.print(f"[red]✗ Unsupported language '{language}'[/red]")
            console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
        return False
    return True


def _load_manifest(args: argparse.Namespace) -> Optional[Tuple[str, Any]]:
    """Load the JSON manifest named on the command line, if any."""
    if not (args.manifest or args.url):
        return None

    try:
        return load_json(file_path=args.manifest, url=args.url)
    except FileNotFoundError as e:
        raise CLIError(str(e)) from e
    except JSONLoaderError as e:
        raise CLIError(f"Failed to load manifest: {e}") from e


def _build_config(args: argparse.Namespace, language: str) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    config_dict: Dict[str, Any] = {}

    # Override with CLI arguments
    if args.output_dir:
        config_dict["output_dir"] = args.output_dir

    if args.suffix is not None:
        config_dict["unit_suffix"] = args.suffix

    if args.lower_family_labels:
        config_dict["family_label_case"] = "lower"

    if args.helper_module:
        config_dict["helper_module"] = args.helper_module

    if args.no_comments:
        config_dict["add_comments"] = False

    try:
        config = load_config(language, custom_config=config_dict, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config, language):
        console.print(f"[yellow]⚠️  {warning}[/yellow]")
        logger.warning("%s", warning)

    return config
