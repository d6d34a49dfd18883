from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List

from recommender.catalog import MovieCatalog, scored_movies
from recommender.config import configure_logging, settings
from recommender.errors import InvalidRecord, RecordNotFound
from recommender.ranker import rank_by_query, rank_by_record
from recommender.trace import trace_query
from recommender.vocabulary import idf_table


def _load(args) -> MovieCatalog:
    return MovieCatalog(Path(args.movies_file)).load()


def _print_results(title: str, movies: List[Dict[str, Any]], as_json: bool, extra: Dict[str, Any]):
    if as_json:
        print(json.dumps({**extra, "results": movies}, ensure_ascii=False))
        return
    print(f"\n{title}")
    if not movies:
        print("No results found.")
    for m in movies:
        genres = ", ".join(m["genres"])
        print(f"- [{m['id']}] {m['title']} ({genres}) score={m['score']:.4f}")


def cmd_similar(args):
    catalog = _load(args)
    index = catalog.index
    try:
        results = rank_by_record(index, args.id, args.top_n)
    except RecordNotFound:
        print(json.dumps({"error": "not_found", "id": args.id}))
        return
    base = index.record(args.id)
    _print_results(
        f"Movies similar to {base.title}:",
        scored_movies(index, results),
        args.json,
        {"baseId": args.id},
    )


def cmd_query(args):
    catalog = _load(args)

    # One-shot mode if text was provided
    if args.text:
        q = " ".join(args.text).strip()
        index = catalog.index
        results = rank_by_query(index, q, args.top_n, args.genre)
        _print_results(f"Results for '{q}':", scored_movies(index, results), args.json, {"query": q})
        return

    # Interactive mode
    print("Index ready. Type your query (or 'exit' to quit).\n")
    while True:
        q = input("Query> ").strip()
        if not q or q.lower() in {"exit", "quit"}:
            break
        index = catalog.index
        results = rank_by_query(index, q, args.top_n, args.genre)
        _print_results(f"Results for '{q}':", scored_movies(index, results), args.json, {"query": q})
        print()


def cmd_trace(args):
    catalog = _load(args)
    q = " ".join(args.text).strip()
    print(json.dumps(trace_query(catalog.index, q, args.top_n, args.genre), ensure_ascii=False))


def cmd_genres(args):
    catalog = _load(args)
    print(json.dumps(catalog.genres(), ensure_ascii=False))


def cmd_stats(args):
    index = _load(args).index
    payload = {
        "count": len(index),
        "vocab": len(index.vocabulary.terms),
        "genres": list(index.vocabulary.genres),
        "built_at": index.built_at.isoformat() if index.built_at else None,
    }
    if args.idf:
        payload["idf"] = idf_table(index.vocabulary)
    print(json.dumps(payload, ensure_ascii=False))


def cmd_add(args):
    catalog = _load(args)
    try:
        movie = catalog.add({
            "title": args.title,
            "year": args.year,
            "genres": args.genre,
            "keywords": args.keyword,
            "poster": args.poster,
            "desc": args.desc,
        })
    except InvalidRecord as e:
        print(json.dumps({"error": "invalid", "message": str(e)}))
        return
    print(json.dumps(movie.to_dict(), ensure_ascii=False))


def main():
    ap = argparse.ArgumentParser(description="Movie recommender CLI")
    ap.add_argument("--movies-file", default=settings.movies_file, help="Path to movies.json")
    ap.add_argument("--log-level", default=settings.log_level)
    sub = ap.add_subparsers(required=True)

    ap_similar = sub.add_parser("similar", help="Movies similar to a movie id")
    ap_similar.add_argument("id", type=int)
    ap_similar.add_argument("--top-n", type=int, default=settings.top_n)
    ap_similar.add_argument("--json", action="store_true", help="Output results as JSON")
    ap_similar.set_defaults(func=cmd_similar)

    ap_query = sub.add_parser("query", help="Search by free text (one-shot or interactive)")
    ap_query.add_argument("text", nargs="*", help="Optional query text for one-shot mode; if omitted, opens interactive shell")
    ap_query.add_argument("--top-n", type=int, default=settings.top_n)
    ap_query.add_argument("--genre", action="append", default=[], help="Genre to match (repeatable)")
    ap_query.add_argument("--json", action="store_true", help="Output results as JSON")
    ap_query.set_defaults(func=cmd_query)

    ap_trace = sub.add_parser("trace", help="Compare cosine and BM25 rankings for a query")
    ap_trace.add_argument("text", nargs="+", help="Query text")
    ap_trace.add_argument("--top-n", type=int, default=settings.top_n)
    ap_trace.add_argument("--genre", action="append", default=[])
    ap_trace.set_defaults(func=cmd_trace)

    ap_genres = sub.add_parser("genres", help="List distinct genres")
    ap_genres.set_defaults(func=cmd_genres)

    ap_stats = sub.add_parser("stats", help="Index statistics")
    ap_stats.add_argument("--idf", action="store_true", help="Include the idf table")
    ap_stats.set_defaults(func=cmd_stats)

    ap_add = sub.add_parser("add", help="Add a movie, persist it and rebuild the index")
    ap_add.add_argument("--title", required=True)
    ap_add.add_argument("--year", type=int)
    ap_add.add_argument("--genre", action="append", default=[])
    ap_add.add_argument("--keyword", action="append", default=[])
    ap_add.add_argument("--poster", default="")
    ap_add.add_argument("--desc", default="")
    ap_add.set_defaults(func=cmd_add)

    args = ap.parse_args()
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
