"""CLI commands for inspecting keyword extraction and ad ranking offline."""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from ..config.runtime import get_settings
from ..domain.advertising import CandidateAd, ConversationTurn
from ..domain.conversation import build_conversation_query, extract_conversation_keywords
from ..domain.keywords import build_search_query, calculate_commercial_intent, extract_keywords
from ..domain.ranking_engine import score_ads
from .mcp.observability import configure_logging


def _load_json_list(path: Path, what: str) -> list:
    """Load a JSON list from ``path``; exits with a message on bad input."""
    if not path.exists():
        print(f"Error: {what} file not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Error: invalid JSON in {path}: {e}", file=sys.stderr)
            sys.exit(1)
    if not isinstance(raw, list):
        print(f"Error: JSON file must contain a list of {what} objects.", file=sys.stderr)
        sys.exit(1)
    return raw


def load_turns_from_file(path: Path) -> list[ConversationTurn]:
    turns: list[ConversationTurn] = []
    for i, item in enumerate(_load_json_list(path, "conversation turn")):
        try:
            turns.append(ConversationTurn.model_validate(item))
        except ValidationError as e:
            print(f"Error: invalid turn at index {i}: {e}", file=sys.stderr)
            sys.exit(1)
    return turns


def load_ads_from_file(path: Path) -> list[CandidateAd]:
    ads: list[CandidateAd] = []
    for i, item in enumerate(_load_json_list(path, "ad")):
        try:
            ads.append(CandidateAd.model_validate(item))
        except ValidationError as e:
            print(f"Error: invalid ad at index {i}: {e}", file=sys.stderr)
            sys.exit(1)
    return ads


def analyze_text(text: str) -> dict:
    keywords = extract_keywords(text)
    return {
        "keywords": keywords,
        "commercial_intent": calculate_commercial_intent(text),
        "search_query": build_search_query(keywords),
    }


def analyze_conversation(path: Path, window: int, message: str | None) -> dict:
    turns = load_turns_from_file(path)
    keywords = extract_conversation_keywords(turns, window)
    if message is None:
        message = next((t.content for t in reversed(turns) if t.role == "user"), "")
    return {
        "conversation_keywords": keywords,
        "search_query": build_conversation_query(message, keywords),
        "commercial_intent": calculate_commercial_intent(message),
    }


def print_ranking(path: Path, keywords: list[str], top: int) -> None:
    ranked = score_ads(load_ads_from_file(path), keywords)
    print("Rank | Score | Relv  | Bid    | Advertiser")
    print("-----|-------|-------|--------|------------------")
    for idx, ad in enumerate(ranked[:top], start=1):
        print(
            f"#{idx:<3} | {ad.combined_score:.3f} | {ad.relevance_score:.3f} "
            f"| ${ad.bid_value:>5.2f} | {ad.title}"
        )


def main():
    parser = argparse.ArgumentParser(description="Inspect contextual ad selection")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Show keywords and commercial intent of a message")
    analyze_parser.add_argument("text", type=str, help="Message text")

    convo_parser = subparsers.add_parser("conversation", help="Rank keywords of a JSON conversation")
    convo_parser.add_argument("file", type=Path, help="JSON list of {role, content} turns")
    convo_parser.add_argument("--window", type=int, default=None, help="Turns to consider (default: settings)")
    convo_parser.add_argument(
        "--message",
        type=str,
        default=None,
        help="Current message (default: last user turn)",
    )

    score_parser = subparsers.add_parser("score", help="Rank a JSON list of candidate ads")
    score_parser.add_argument("file", type=Path, help="JSON list of ads")
    score_parser.add_argument("--keywords", nargs="*", default=[], help="Target keywords")
    score_parser.add_argument("--top", type=int, default=5, help="Rows to print (default: 5)")

    subparsers.add_parser("serve", help="Run the MCP engine server on stdio")

    args = parser.parse_args()
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "analyze":
        print(json.dumps(analyze_text(args.text), indent=2))
    elif args.command == "conversation":
        window = args.window or settings.conversation_window
        try:
            result = analyze_conversation(args.file, window, args.message)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(result, indent=2))
    elif args.command == "score":
        print_ranking(args.file, args.keywords, max(1, args.top))
    elif args.command == "serve":
        from .mcp_engine import main as serve

        serve()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
