"""Command-line interface for managing and querying Endee indexes."""

from __future__ import annotations

import argparse
import json
from typing import Any

import anyio
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from endee_client.client import EndeeClient
from endee_client.codec.filters import parse_clauses
from endee_client.config import Settings
from endee_client.exceptions import EndeeError
from endee_client.types import (
    DEFAULT_EF,
    DEFAULT_EF_CONSTRUCTION,
    DEFAULT_M,
    DEFAULT_TOP_K,
    CreateIndexOptions,
    Precision,
    QueryOptions,
    QueryResult,
    SpaceType,
)

console = Console()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Endee CLI (index management + vector search)."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List indexes.")

    create_parser = subparsers.add_parser("create", help="Create an index.")
    create_parser.add_argument("--name", type=str, required=True, help="Index name.")
    create_parser.add_argument(
        "--dim", type=int, required=True, help="Dense vector dimension."
    )
    create_parser.add_argument(
        "--space-type",
        type=str,
        choices=[s.value for s in SpaceType],
        default=SpaceType.COSINE.value,
        help="Distance metric.",
    )
    create_parser.add_argument(
        "--m", type=int, default=DEFAULT_M, help="Graph connectivity (M)."
    )
    create_parser.add_argument(
        "--ef-con",
        type=int,
        default=DEFAULT_EF_CONSTRUCTION,
        help="Construction breadth (efConstruction).",
    )
    create_parser.add_argument(
        "--precision",
        type=str,
        choices=[p.value for p in Precision],
        default=Precision.INT8D.value,
        help="Quantization precision.",
    )
    create_parser.add_argument(
        "--sparse-dim",
        type=int,
        default=None,
        help="Sparse dimension (enables hybrid search).",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete an index.")
    delete_parser.add_argument("--name", type=str, required=True, help="Index name.")

    describe_parser = subparsers.add_parser("describe", help="Describe an index.")
    describe_parser.add_argument(
        "--name", type=str, required=True, help="Index name."
    )

    query_parser = subparsers.add_parser("query", help="Search an index.")
    query_parser.add_argument("--name", type=str, required=True, help="Index name.")
    query_parser.add_argument(
        "--vector", type=json.loads, default=None, help="Dense vector as JSON."
    )
    query_parser.add_argument(
        "--sparse-indices",
        type=json.loads,
        default=None,
        help="Sparse indices as JSON.",
    )
    query_parser.add_argument(
        "--sparse-values",
        type=json.loads,
        default=None,
        help="Sparse values as JSON.",
    )
    query_parser.add_argument(
        "--top-k", type=int, default=DEFAULT_TOP_K, help="Number of results."
    )
    query_parser.add_argument(
        "--ef", type=int, default=DEFAULT_EF, help="Search breadth."
    )
    query_parser.add_argument(
        "--filter",
        type=str,
        default=None,
        help='Filter clauses as JSON, e.g. \'[{"genre": {"$eq": "drama"}}]\'.',
    )
    query_parser.add_argument(
        "--include-vectors",
        action="store_true",
        help="Return stored vectors with each hit.",
    )
    query_parser.add_argument(
        "--json", action="store_true", help="Emit results as JSON to stdout."
    )

    get_parser = subparsers.add_parser("get", help="Fetch a vector by ID.")
    get_parser.add_argument("--name", type=str, required=True, help="Index name.")
    get_parser.add_argument("--id", type=str, required=True, help="Vector ID.")
    get_parser.add_argument(
        "--json", action="store_true", help="Emit the vector as JSON to stdout."
    )

    return parser.parse_args(argv)


def _load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        console.print("[red]Configuration error:[/red]")
        for error in exc.errors():
            field = error.get("loc", ("unknown",))[0]
            msg = error.get("msg", "Invalid value")
            console.print(f"  [yellow]{field}[/yellow]: {msg}")
        raise


def _result_to_dict(result: QueryResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "similarity": result.similarity,
        "distance": result.distance,
        "norm": result.norm,
        "meta": result.meta,
        "filter": result.filter,
        "vector": result.vector,
    }


def _print_results(results: list[QueryResult]) -> None:
    table = Table(title=f"{len(results)} results")
    table.add_column("ID")
    table.add_column("Similarity", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Meta")
    for result in results:
        table.add_row(
            result.id,
            f"{result.similarity:.4f}",
            f"{result.distance:.4f}",
            json.dumps(result.meta),
        )
    console.print(table)


async def _run_command(client: EndeeClient, args: argparse.Namespace) -> int:
    if args.command == "list":
        console.print_json(data=await client.list_indexes())
        return 0

    if args.command == "create":
        options = CreateIndexOptions(
            name=args.name,
            dimension=args.dim,
            space_type=SpaceType.from_value(args.space_type),
            m=args.m,
            ef_con=args.ef_con,
            precision=Precision.from_value(args.precision),
            sparse_dimension=args.sparse_dim,
        )
        console.print(await client.create_index(options))
        return 0

    if args.command == "delete":
        console.print(await client.delete_index(args.name))
        return 0

    index = await client.get_index(args.name)

    if args.command == "describe":
        console.print_json(data=index.describe().to_dict())
        return 0

    if args.command == "query":
        options = QueryOptions(
            vector=args.vector,
            top_k=args.top_k,
            ef=args.ef,
            filter=parse_clauses(args.filter) if args.filter else None,
            include_vectors=args.include_vectors,
            sparse_indices=args.sparse_indices,
            sparse_values=args.sparse_values,
        )
        results = await index.query(options)
        if args.json:
            print(json.dumps([_result_to_dict(r) for r in results]))
        else:
            _print_results(results)
        return 0

    if args.command == "get":
        info = await index.get_vector(args.id)
        payload = {
            "id": info.id,
            "norm": info.norm,
            "meta": info.meta,
            "filter": info.filter,
            "vector": info.vector,
        }
        if args.json:
            print(json.dumps(payload))
        else:
            console.print_json(data=payload)
        return 0

    return 1


async def _run(args: argparse.Namespace) -> int:
    try:
        settings = _load_settings()
    except ValidationError:
        return 1

    async with EndeeClient.from_settings(settings) as client:
        try:
            return await _run_command(client, args)
        except EndeeError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            return 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    return anyio.run(_run, args)


if __name__ == "__main__":
    raise SystemExit(main())
