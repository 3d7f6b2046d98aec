"""CLI for the pedigree engine (import, charts, COI, parent linking)."""

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from kennel_pedigree.api import GraphQLDogRepository, KennelApi
from kennel_pedigree.config import DATABASE_FILENAME, DEFAULT_GENERATIONS, resolve_data_directory
from kennel_pedigree.core.analysis.coefficient import coefficient, mating_coefficient
from kennel_pedigree.core.analysis.completeness import completeness
from kennel_pedigree.core.database.schema import migrate_schema
from kennel_pedigree.core.importer.loader import import_source_dir
from kennel_pedigree.core.tree.builder import build_tree
from kennel_pedigree.core.tree.markdown import render_pedigree_as_markdown
from kennel_pedigree.core.tree.positions import extract_generation, path_label, pathway
from kennel_pedigree.core.write.linker import link_parents
from kennel_pedigree.errors import PartialLinkFailureError, PedigreeError
from kennel_pedigree.logging_config import configure_logging
from kennel_pedigree.models.dog import DogRecord
from kennel_pedigree.models.pedigree import CoefficientResult
from kennel_pedigree.permissions import PedigreeEditCapability, UserRole
from kennel_pedigree.protocols import DogRepositoryProtocol
from kennel_pedigree.repository import SqliteDogRepository

app = typer.Typer(help="Kennel pedigree: ancestry charts, inbreeding and parent links.")

_DEFAULT_DATA_DIR = resolve_data_directory()

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Pedigree database directory"),
]
GenerationsOption = Annotated[
    int,
    typer.Option("--generations", "-g", min=0, max=6, help="Generations to include"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    api_url: Annotated[
        str | None,
        typer.Option("--api-url", help="Read and write through the kennel GraphQL API"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = {"api_url": api_url}


@app.command(name="import")
def import_cmd(
    source_dir: Annotated[
        Path,
        typer.Option("--source-dir", "-s", help="Directory with dog .json exports"),
    ],
    data_dir: DataDirOption = None,
    force: bool = typer.Option(False, "--force", "-f", help="Re-import all files"),
) -> None:
    """Import exported dog records into the pedigree database."""
    if not source_dir.exists():
        logger.error("Source directory not found: {}", source_dir)
        raise typer.Exit(1)

    dst = data_dir or _DEFAULT_DATA_DIR
    dst.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(dst / DATABASE_FILENAME))
    try:
        migrate_schema(conn)
        stats = import_source_dir(conn, source_dir, force=force)
        typer.echo(
            f"Imported {stats.files_imported} files "
            f"({stats.dogs_imported} dogs), "
            f"skipped {stats.files_skipped}"
        )
    finally:
        conn.close()


@contextmanager
def _repository(ctx: typer.Context, data_dir: Path | None) -> Iterator[DogRepositoryProtocol]:
    """Open the configured repository; engine errors end the command with exit 1."""
    api_url = (ctx.obj or {}).get("api_url")
    conn: sqlite3.Connection | None = None
    if api_url:
        try:
            repository: DogRepositoryProtocol = GraphQLDogRepository(KennelApi(url=api_url))
        except RuntimeError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
    else:
        db_path = (data_dir or _DEFAULT_DATA_DIR) / DATABASE_FILENAME
        if not db_path.exists():
            logger.error("Pedigree database not found: {}. Run 'import' first.", db_path)
            raise typer.Exit(1)
        conn = sqlite3.connect(str(db_path))
        repository = SqliteDogRepository(conn)

    try:
        yield repository
    except PartialLinkFailureError as e:
        logger.error("{}", e)
        for attempt in e.attempts:
            status = "ok" if attempt.succeeded else f"failed: {attempt.error}"
            typer.echo(f"  {attempt.description}: {status}")
        raise typer.Exit(1) from e
    except PedigreeError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    finally:
        if conn is not None:
            conn.close()


def _dog_json(dog: DogRecord | None) -> dict[str, Any] | None:
    if dog is None:
        return None
    return {
        "id": dog.id,
        "name": dog.name,
        "gender": dog.gender.value,
        "registration_number": dog.registration_number,
        "date_of_birth": dog.date_of_birth.isoformat() if dog.date_of_birth else None,
        "breed": dog.breed,
        "color": dog.color,
    }


def _coefficient_json(result: CoefficientResult) -> dict[str, Any]:
    return {
        "coefficient": float(result.value),
        "percentage": result.percentage,
        "risk_level": result.risk_level.value,
        "genetic_diversity": result.genetic_diversity,
        "common_ancestors": [
            {
                "dog": _dog_json(a.dog),
                "occurrences": a.occurrences,
                "contribution": float(a.contribution),
                "genetic_influence": float(a.genetic_influence),
                "pathways": [pathway(p) for p in a.sire_paths + a.dam_paths],
            }
            for a in result.common_ancestors
        ],
    }


def _echo_coefficient(result: CoefficientResult) -> None:
    typer.echo(f"COI: {result.percentage:.2f}% ({result.risk_level.value})")
    typer.echo(f"  {result.risk_level.guidance}")
    if not result.common_ancestors:
        typer.echo("No common ancestors found.")
        return
    typer.echo(f"\n{len(result.common_ancestors)} common ancestors:\n")
    for a in result.common_ancestors:
        typer.echo(
            f"  {a.dog.display_name} [id={a.id}]  "
            f"contribution {float(a.contribution):.2%}, appears {a.occurrences} times"
        )
        for p in a.sire_paths + a.dam_paths:
            typer.echo(f"    {pathway(p)}")


@app.command()
def show(
    ctx: typer.Context,
    dog_id: str = typer.Argument(..., help="Dog ID"),
    generations: GenerationsOption = DEFAULT_GENERATIONS,
    data_dir: DataDirOption = None,
) -> None:
    """Show a dog's pedigree chart with completeness and COI."""
    with _repository(ctx, data_dir) as repository:
        tree = build_tree(repository, dog_id, generations)
        typer.echo(render_pedigree_as_markdown(tree))
        typer.echo(f"Completeness: {completeness(tree, generations)}%")
        result = coefficient(tree)
        typer.echo(f"COI: {result.percentage:.2f}% ({result.risk_level.value})")
        for mismatch in tree.gender_mismatches:
            typer.echo(
                f"Warning: {path_label(mismatch.path)} {mismatch.dog_id} "
                f"is recorded {mismatch.recorded.value}"
            )


@app.command()
def generation(
    ctx: typer.Context,
    dog_id: str = typer.Argument(..., help="Dog ID"),
    number: int = typer.Argument(..., min=0, max=6, help="Generation (1 = parents)"),
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """List every slot of one generation, unknown ones included."""
    with _repository(ctx, data_dir) as repository:
        tree = build_tree(repository, dog_id, number)
        slots = extract_generation(tree, number)

    if output_json:
        data = [
            {"position": path_label(path), "dog": _dog_json(node.dog if node else None)}
            for path, node in slots
        ]
        typer.echo(json.dumps(data, indent=2))
        return
    for path, node in slots:
        name = f"{node.dog.display_name} [id={node.id}]" if node else "unknown"
        typer.echo(f"  {path_label(path)}: {name}")


@app.command()
def coi(
    ctx: typer.Context,
    dog_id: str = typer.Argument(..., help="Dog ID"),
    generations: GenerationsOption = DEFAULT_GENERATIONS,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Compute a dog's coefficient of inbreeding."""
    with _repository(ctx, data_dir) as repository:
        result = coefficient(build_tree(repository, dog_id, generations))

    if output_json:
        typer.echo(json.dumps(_coefficient_json(result), indent=2))
    else:
        _echo_coefficient(result)


@app.command()
def mating(
    ctx: typer.Context,
    sire_id: str = typer.Argument(..., help="Intended sire"),
    dam_id: str = typer.Argument(..., help="Intended dam"),
    generations: GenerationsOption = DEFAULT_GENERATIONS,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Compute the COI a litter of SIRE x DAM would have."""
    with _repository(ctx, data_dir) as repository:
        result = mating_coefficient(repository, sire_id, dam_id, generations)

    if output_json:
        typer.echo(json.dumps(_coefficient_json(result), indent=2))
    else:
        _echo_coefficient(result)


@app.command(name="completeness")
def completeness_cmd(
    ctx: typer.Context,
    dog_id: str = typer.Argument(..., help="Dog ID"),
    generations: GenerationsOption = DEFAULT_GENERATIONS,
    data_dir: DataDirOption = None,
) -> None:
    """Show the percentage of known ancestors."""
    with _repository(ctx, data_dir) as repository:
        tree = build_tree(repository, dog_id, generations)
        typer.echo(f"{completeness(tree, generations)}%")


@app.command()
def link(
    ctx: typer.Context,
    dog_id: str = typer.Argument(..., help="Dog whose parents are set"),
    sire: Annotated[str | None, typer.Option("--sire", help="Sire ID")] = None,
    dam: Annotated[str | None, typer.Option("--dam", help="Dam ID")] = None,
    role: Annotated[
        UserRole, typer.Option("--role", help="Role of the acting user")
    ] = UserRole.VIEWER,
    user_id: Annotated[str | None, typer.Option("--user-id", help="Acting user ID")] = None,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Attach or replace a dog's sire and/or dam."""
    capability = PedigreeEditCapability(role=role, user_id=user_id)
    with _repository(ctx, data_dir) as repository:
        result = link_parents(
            repository, dog_id, permission=capability, sire_id=sire, dam_id=dam
        )

    if output_json:
        data = {
            "success": True,
            "dog_id": result.dog_id,
            "sire_id": result.links.sire_id,
            "dam_id": result.links.dam_id,
            "attempts": [
                {"links": a.description, "succeeded": a.succeeded, "error": a.error}
                for a in result.attempts
            ],
        }
        typer.echo(json.dumps(data, indent=2))
    else:
        suffix = " (in two writes)" if result.used_fallback else ""
        typer.echo(f"Linked {dog_id}: sire={sire or '-'} dam={dam or '-'}{suffix}")
