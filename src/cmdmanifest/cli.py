import json
import sys
import typer
from enum import Enum
from pathlib import Path
from typing import List, Optional
from cmdmanifest.config import settings
from cmdmanifest.logging import logger, get_run_id

app = typer.Typer(no_args_is_help=True)


class OutputFormat(str, Enum):
    MCP = "mcp"
    OPENAI = "openai"


@app.callback()
def main():
    """
    Command-to-tool manifest compiler CLI.
    """
    pass

@app.command(name="doctor")
def doctor():
    """
    Check system configuration and environment health.
    """
    logger.info("Running doctor check...")

    print("\n🩺 cmdmanifest Doctor\n")

    # Check 1: Environment / Interpreter
    print(f"Python: {sys.version.split()[0]}")
    print(f"Prefix: {sys.prefix}")
    print(f"Run ID: {get_run_id()}")

    # Check 2: Configuration
    print("\n[Configuration]")
    print(f"LOG_LEVEL:                    {settings.LOG_LEVEL}")
    print(f"REGISTRY_DB_URL:              {settings.REGISTRY_DB_URL}")
    print(f"DEFAULT_PARAMETER_SET_INDEX:  {settings.DEFAULT_PARAMETER_SET_INDEX}")
    print(f"COMPRESS_OUTPUT:              {settings.COMPRESS_OUTPUT}")
    print(f"JSON_MAX_DEPTH:               {settings.JSON_MAX_DEPTH}")

    # Check 3: Registry database
    from cmdmanifest.db import DB_URL
    from sqlalchemy.engine import make_url
    database = make_url(DB_URL).database
    if database and database != ":memory:" and not Path(database).exists():
        print(f"\n[Registry Database]            ❌ Missing: {Path(database).absolute()} (Run 'cmdmanifest db init')")
    else:
        print(f"\n[Registry Database]            ✅ Found: {database}")

    print("\nDoctor check complete.")


@app.command(name="compile")
def compile_cmd(
    names: List[str] = typer.Argument(..., help="Command names or aliases to compile"),
    manifest: Optional[Path] = typer.Option(None, "--manifest", "-m", help="Read commands from a JSON manifest instead of the registry database"),
    parameter_set_index: int = typer.Option(settings.DEFAULT_PARAMETER_SET_INDEX, "--parameter-set-index", "-p", min=0, help="Parameter set ordinal to compile"),
    compress: bool = typer.Option(settings.COMPRESS_OUTPUT, "--compress/--no-compress", help="Minified or indented JSON"),
    output_format: OutputFormat = typer.Option(OutputFormat.MCP, "--format", "-f", help="Manifest shape"),
):
    """Compile commands into a JSON tool manifest on stdout."""
    from cmdmanifest.compiler import compile_tools
    from cmdmanifest.compiler.emitter import dump_json, to_openai_tools
    from cmdmanifest.errors import RegistrationError

    if manifest is not None:
        from cmdmanifest.registry import load_manifest
        try:
            registry = load_manifest(manifest)
        except (OSError, json.JSONDecodeError, RegistrationError) as e:
            logger.error(f"Failed to load manifest {manifest}: {e}")
            print(f"❌ Failed: {e}", file=sys.stderr)
            raise typer.Exit(code=1)
        tools = compile_tools(registry, names, parameter_set_index)
    else:
        from sqlmodel import Session
        from cmdmanifest.db import engine
        from cmdmanifest.registry import SqlCommandRegistry
        from sqlalchemy.exc import OperationalError
        try:
            with Session(engine) as session:
                tools = compile_tools(SqlCommandRegistry(session), names, parameter_set_index)
        except OperationalError as e:
            logger.error(f"Registry database unavailable: {e}")
            print("❌ Registry database unavailable. Run 'cmdmanifest db init' first.", file=sys.stderr)
            raise typer.Exit(code=1)

    if output_format == OutputFormat.OPENAI:
        payload = to_openai_tools(tools)
    else:
        payload = [t.to_dict() for t in tools]
    print(dump_json(payload, compress=compress, max_depth=settings.JSON_MAX_DEPTH))


db_app = typer.Typer(help="Registry database management commands.")
app.add_typer(db_app, name="db")

@db_app.command("init")
def init():
    """Initialize the registry tables."""
    from cmdmanifest.db import init_db
    try:
        init_db()
        logger.info("Registry database initialized successfully.")
        print("✅ Registry database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)

@db_app.command("import")
def import_manifest(path: Path):
    """Load a JSON manifest into the registry database."""
    from sqlmodel import Session
    from cmdmanifest.db import engine, init_db
    from cmdmanifest.registry import load_manifest, save_alias, save_command
    try:
        registry = load_manifest(path)
        init_db()
        with Session(engine) as session:
            for name in registry.list_commands():
                save_command(session, registry.get_command(name))
            for alias, target in registry.list_aliases().items():
                save_alias(session, alias, target)
        print(f"✅ Imported {len(registry.list_commands())} command(s), {len(registry.list_aliases())} alias(es).")
    except Exception as e:
        logger.error(f"Import failed: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)

@db_app.command("list")
def list_commands():
    """List registered commands and aliases."""
    from sqlmodel import Session
    from cmdmanifest.db import engine
    from cmdmanifest.registry import SqlCommandRegistry
    from sqlalchemy.exc import OperationalError
    try:
        with Session(engine) as session:
            registry = SqlCommandRegistry(session)
            commands = registry.list_commands()
            aliases = registry.list_aliases()
    except OperationalError as e:
        logger.error(f"Registry database unavailable: {e}")
        print("❌ Registry database unavailable. Run 'cmdmanifest db init' first.")
        raise typer.Exit(code=1)

    if not commands and not aliases:
        print("No commands registered.")
        return

    print(f"Found {len(commands)} command(s):")
    for i, name in enumerate(commands, 1):
        print(f"{i}. {name}")
    if aliases:
        print(f"\nAliases ({len(aliases)}):")
        for alias, target in aliases.items():
            print(f"  {alias} -> {target}")

if __name__ == "__main__":
    app()
