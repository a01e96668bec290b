# ============================
# bertrank: Unified CLI
# Commands:
#   embed: text files -> <md5>.json embedding records
#   query: query text -> most similar stored record (cosine)
# ============================

from __future__ import annotations
import logging
from pathlib import Path

import click
import numpy as np
from tqdm import tqdm

from bertrank.embedding.embedder import EmbeddingEngine
from bertrank.embedding.translator import TRANSLATORS
from bertrank.errors import BertRankError
from bertrank.search.checker import EmbeddingChecker
from bertrank.search.indexer import BatchStats, embed_directory, list_inputs
from bertrank.search.store import read_records
from bertrank.utils.config import load_config

LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"


def _load_engine(cfg: dict, model_dir: Path, family: str | None) -> EmbeddingEngine:
    m = cfg["model"]
    return EmbeddingEngine.from_model_dir(
        model_dir,
        family=family or m["family"],
        model_file=m["model_file"],
        vocab_file=m["vocab_file"],
        max_seq_length=int(m["max_seq_length"]),
        unknown_token=m["unknown_token"],
    )


def _preview(text: str, n: int) -> str:
    text = " ".join(text.split())
    return text if len(text) <= n else text[:n] + " ..."


family_option = click.option(
    "--family",
    type=click.Choice(sorted(TRANSLATORS)),
    default=None,
    help="Pooling strategy of the model (defaults to model.family in config).",
)
lowercase_option = click.option(
    "--lowercase/--no-lowercase",
    default=None,
    help="Lower-case text before embedding (defaults to text.lowercase in config).",
)


# ==========================================================
# CLI root
# ==========================================================
@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to config.yaml (defaults to project root).",
)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging (tokens, truncation).")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool):
    """bertrank: ONNX transformer embeddings and cosine document ranking."""
    cfg = load_config(config_path)
    level = "DEBUG" if verbose else str(cfg["logging"]["level"]).upper()
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("bertrank").setLevel(level)
    ctx.obj = {"cfg": cfg}


# ==========================================================
# embed: batch embedding generation
# ==========================================================
@cli.command("embed")
@click.argument("input_dir", type=click.Path(path_type=Path))
@click.argument("model_dir", type=click.Path(path_type=Path))
@click.option("-o", "--out", "out_dir", type=click.Path(path_type=Path),
              help="Output folder for records (defaults to paths.embeddings).")
@family_option
@lowercase_option
@click.option("--progress", is_flag=True, help="Show a progress bar instead of per-file details.")
@click.pass_context
def embed_cmd(ctx, input_dir, model_dir, out_dir, family, lowercase, progress):
    """
    Embed every text file of INPUT_DIR with the model in MODEL_DIR
    (model.onnx + vocab.txt) and save one <md5>.json record per file.
    """
    cfg = ctx.obj["cfg"]
    out_dir = out_dir or Path(cfg["paths"]["embeddings"])
    lowercase = cfg["text"]["lowercase"] if lowercase is None else lowercase
    preview_chars = int(cfg["text"]["preview_chars"])
    sample_size = int(cfg["text"]["sample_size"])

    try:
        engine = _load_engine(cfg, model_dir, family)
        files = list_inputs(input_dir)
        stats = BatchStats()
        results = embed_directory(files, engine, out_dir, lowercase=lowercase, stats=stats)
        for res in tqdm(results, total=len(files), desc="embed", disable=not progress):
            if progress:
                continue
            sample = np.round(res.vector[:sample_size], 6).tolist()
            click.echo(str(res.source.resolve()))
            click.echo(f"Input text: {_preview(res.text, preview_chars)}")
            click.echo(f"Generated embedding (dimension: {res.vector.shape[0]})")
            click.echo(f"Sample values: {sample}...")
            click.echo(f"Embedding saved at: {res.output.resolve()}")
    except BertRankError as exc:
        raise SystemExit(f"[embed] {exc}")

    click.echo(f"[embed] wrote {stats.written} records to {out_dir} ({len(stats.failed)} failed)")
    if stats.failed:
        ctx.exit(1)


# ==========================================================
# query: rank stored records against a query
# ==========================================================
@cli.command("query")
@click.argument("query", type=str)
@click.argument("model_dir", type=click.Path(path_type=Path))
@click.argument("embeddings_dir", type=click.Path(path_type=Path))
@family_option
@lowercase_option
@click.option("-k", default=1, show_default=True, type=click.IntRange(min=1),
              help="Top-K results to list.")
@click.pass_context
def query_cmd(ctx, query, model_dir, embeddings_dir, family, lowercase, k):
    """
    Embed QUERY with the model in MODEL_DIR and report the most similar
    record in EMBEDDINGS_DIR. Use the same model family the records were
    built with.
    """
    cfg = ctx.obj["cfg"]
    lowercase = cfg["text"]["lowercase"] if lowercase is None else lowercase
    if lowercase:
        query = query.lower()

    try:
        records = read_records(embeddings_dir)
        if not records:
            click.echo("No documents found in the embeddings directory.")
            return
        engine = _load_engine(cfg, model_dir, family)
        ranking = EmbeddingChecker(engine, records).check(query)
    except BertRankError as exc:
        raise SystemExit(f"[query] {exc}")

    top = ranking[0]
    click.echo(f"Query: {query}")
    click.echo(f"Most related document: {top.identifier}")
    click.echo(f"Cosine similarity: {top.score:.4f}")
    if k > 1:
        click.echo(f"\nTop {k} results:")
        for pos, entry in enumerate(ranking[:k], start=1):
            click.echo(f"{pos:02d}\tscore={entry.score:.4f}\tdoc={entry.identifier}")


def main():
    cli(prog_name="bertrank")


if __name__ == "__main__":
    main()
