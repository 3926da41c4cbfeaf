import json
import logging
import sys
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .pipeline import AtomicWriter, CodeGeneratorConfig, GenerationError, GenerationErrors, PipelineGenerator


def paths_output_path(output: Path) -> Path:
    """Path module written next to the data module: "<stem>_paths.py"."""
    return output.with_name(f"{output.stem}_paths{output.suffix or '.py'}")


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Import name of the data module (default: OUTPUT stem)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True), help="JSON configuration file")
@click.option("--fakeroot-name", default=None, type=str, help="Name of the generated root struct")
@click.option("--no-compress", is_flag=True, default=False, help="Keep every schema level in names and paths")
@click.option("--union-style", default=None, type=click.Choice(["wrapper", "simplified"]))
@click.option(
    "--list-builder-key-threshold",
    default=None,
    type=click.IntRange(min=0),
    help="Lists with at least this many keys get With<Key> builder methods (0 disables)",
)
@click.option("--skip-enum-dedup", is_flag=True, default=False, help="One enum type per enumeration leaf")
@click.option("--shorten-enum-leaf-names", is_flag=True, default=False, help="Drop module names from enum leaf types")
@click.option("--prefer-operational-state", is_flag=True, default=False, help="Prefer state leaves over config leaves")
@click.option("--generate-getters", is_flag=True, default=False, help="get_<x>() and get_or_create_<x>() struct methods")
@click.option("--generate-delete", is_flag=True, default=False, help="delete_<list>() struct methods")
@click.option("--generate-append", is_flag=True, default=False, help="append_<list>() struct methods")
@click.option("--generate-rename", is_flag=True, default=False, help="rename_<list>() struct methods")
@click.option("--generate-leaf-getters", is_flag=True, default=False, help="get_<leaf>() struct methods")
@click.option("--generate-leaf-setters", is_flag=True, default=False, help="set_<leaf>() struct methods")
@click.option("--format", "format_tool", default=None, type=click.Choice(["ruff", "black"]), help="Format the output")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("schema_json", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def yang_to_code(
    name,
    config,
    fakeroot_name,
    no_compress,
    union_style,
    list_builder_key_threshold,
    skip_enum_dedup,
    shorten_enum_leaf_names,
    prefer_operational_state,
    generate_getters,
    generate_delete,
    generate_append,
    generate_rename,
    generate_leaf_getters,
    generate_leaf_setters,
    format_tool,
    verbose,
    schema_json,
    output,
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    with open(schema_json) as f:
        schema = json.load(f)

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # Command line flags override the config file
    if fakeroot_name is not None:
        config.fakeroot_name = fakeroot_name
    if no_compress:
        config.compress_paths = False
    if union_style is not None:
        config.union_style = union_style
    if list_builder_key_threshold is not None:
        config.list_builder_key_threshold = list_builder_key_threshold
    if skip_enum_dedup:
        config.skip_enum_deduplication = True
    if shorten_enum_leaf_names:
        config.shorten_enum_leaf_names = True
    if prefer_operational_state:
        config.prefer_operational_state = True
    for option, enabled in (
        ("generate_getters", generate_getters),
        ("generate_delete_method", generate_delete),
        ("generate_append_method", generate_append),
        ("generate_rename_method", generate_rename),
        ("generate_leaf_getters", generate_leaf_getters),
        ("generate_leaf_setters", generate_leaf_setters),
    ):
        if enabled:
            setattr(config, option, True)
    if format_tool is not None:
        config.formatter.enabled = True
        config.formatter.tool = format_tool
    config.__post_init__()

    output = Path(output)
    if name is None:
        name = output.stem

    try:
        generator = PipelineGenerator(
            name,
            schema,
            config,
            generation_comment=f"Generated by {reconstruct_command_line(yang_to_code)}",
        )
        code = generator.generate()
        paths_code = generator.generate_paths() if config.generate_path_structs else None
    except GenerationErrors as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except GenerationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    writer = AtomicWriter()
    writer.write(output, code)
    if paths_code is not None:
        writer.write(paths_output_path(output), paths_code)
