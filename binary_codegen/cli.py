import importlib
import json
import sys
from pathlib import Path

import click

from .cli_utils import setup_logging
from .config import CodeGeneratorConfig, OutputConfig, OutputMode
from .descriptors import ContextDeclaration
from .driver import GenerationDriver
from .errors import CodeWriteError
from .writer import write_units


def load_contexts(target: str) -> list[ContextDeclaration]:
    """Import the ContextDeclaration (or list of them) named by ``module:attribute``."""
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise click.BadParameter(f"expected module:attribute, got {target!r}", param_hint="TARGET")

    # Console scripts do not put the working directory on the path
    if "" not in sys.path and "." not in sys.path:
        sys.path.insert(0, ".")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}", param_hint="TARGET") from e
    try:
        value = getattr(module, attribute)
    except AttributeError as e:
        raise click.BadParameter(f"{module_name!r} has no attribute {attribute!r}", param_hint="TARGET") from e

    if isinstance(value, ContextDeclaration):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(c, ContextDeclaration) for c in value):
        return list(value)
    raise click.BadParameter(f"{target!r} does not name context declarations", param_hint="TARGET")


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite units that already exist")
@click.option("--workers", "-w", default=None, type=click.IntRange(min=1), help="Worker threads for per-type generation")
@click.option("--debug", is_flag=True, default=False, help="Log every resolution step")
@click.argument("target", type=str)
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def binary_codegen(config, force, workers, debug, target, output):
    """Generate converters for the context declarations named by TARGET (module:attribute).

    Units of each context are written under OUTPUT, in the directory matching
    the context's namespace.
    """
    setup_logging(debug)

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flag overrides the config file
    if workers is not None:
        config.max_workers = workers

    output_config = OutputConfig(mode=OutputMode.FORCE if force else OutputMode.ERROR_IF_EXISTS)

    contexts = load_contexts(target)
    results = GenerationDriver(config).run_all(contexts)

    has_errors = False
    for context, result in zip(contexts, results, strict=True):
        for diagnostic in result.diagnostics:
            click.echo(str(diagnostic), err=True)
        has_errors = has_errors or result.has_errors

        if not result.units:
            continue
        directory = Path(output).joinpath(*context.namespace.split("."))
        try:
            paths = write_units(directory, result.units, output_config)
        except CodeWriteError as e:
            raise click.ClickException(str(e)) from e
        click.echo(f"{result.context_name}: {len(paths)} units written to {directory}")

    if has_errors:
        sys.exit(1)
