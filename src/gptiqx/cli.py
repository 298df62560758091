"""Command-line interface for GPTIQX."""

import argparse
import logging
import subprocess
import sys
from pathlib import Path

from .core.config import settings
from .core.constants import FileConstants
from .core.insights import (
    select_insights, select_primary_insight, summarize_status,
    select_focus_area, generate_takeaway,
)
from .core.models import TrendDelta
from .core.trends import weekly_trends, learning_timeline, profile_stats
from .services.history import ConversationHistory
from .services.llm import ScoringServiceFactory, AnalysisError
from .ui import run_streamlit_app
from .utils.data_prep import prepare_export, export_to_json, export_to_csv, export_filename

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT
    )


def _read_transcript(path):
    if path and path != "-":
        return Path(path).read_text(encoding="utf-8")
    return sys.stdin.read()


def _print_scores(scores):
    print(f"  UserIQ:         {scores.user_iq}")
    print(f"  GPTIQ:          {scores.gpt_iq}")
    print(f"  ConversationIQ: {scores.conversation_iq}")
    breakdown = [
        ("User clarity", scores.user_clarity), ("User depth", scores.user_depth),
        ("User creativity", scores.user_creativity), ("GPT clarity", scores.gpt_clarity),
        ("GPT depth", scores.gpt_depth), ("GPT flow", scores.gpt_flow),
        ("Conversation flow", scores.conversation_flow),
        ("Conversation synergy", scores.conversation_synergy),
    ]
    reported = [(name, value) for name, value in breakdown if value is not None]
    if reported:
        print("\nBreakdown:")
        for name, value in reported:
            print(f"  {name}: {value}")
    if scores.justification:
        print(f"\nJustification: {scores.justification}")


def _print_insights(history):
    conversations = history.list()
    latest = conversations[-1] if conversations else None
    scores = latest.scores if latest else None

    if latest:
        trends = weekly_trends(conversations)
        user_trend, gpt_trend, conv_trend = trends["user_iq"], trends["gpt_iq"], trends["conversation_iq"]
    else:
        user_trend = gpt_trend = conv_trend = TrendDelta.empty()

    if scores:
        print(f"\nStatus: {summarize_status(scores)}")

        primary = select_primary_insight(scores)
        print(f"\nYour Next Improvement ({primary.confidence.value} confidence)")
        print(f"  {primary.problem}")
        print(f"  Why: {primary.reason}")
        print(f"  Do this: {primary.action}")

        focus = select_focus_area(scores)
        print(f"\nCurrent Improvement Focus: {focus.name}")
        print(f"  {focus.description}")
        print(f"  Improving this could raise your ConversationIQ by ~{focus.impact_range} points")

    print("\nInsights:")
    for insight in select_insights(scores, user_trend, gpt_trend, conv_trend, len(conversations)):
        print(f"  [{insight.kind.value}] {insight.title}: {insight.description}")
        if insight.recommendation:
            print(f"      -> {insight.recommendation}")

    timeline = learning_timeline(conversations)
    if timeline:
        print("\nLearning Timeline:")
        for conv, takeaway in timeline:
            s = conv.scores
            print(f"  {conv.created_at:%Y-%m-%d} {conv.title}: "
                  f"{s.user_iq}/{s.gpt_iq}/{s.conversation_iq} - {takeaway}")


def cmd_analyze(args):
    """Analyze command."""
    transcript = _read_transcript(args.transcript)
    service = ScoringServiceFactory.create()
    history = ConversationHistory(args.history)

    print("Analyzing conversation...")
    previous = history.latest()
    scores = service.analyze(transcript)

    print("\nAnalysis Complete")
    _print_scores(scores)
    if previous:
        print(f"\nSince last analysis: {generate_takeaway(scores, previous)}")

    if not args.no_save:
        conversation = history.add(transcript, scores, title=args.title)
        print(f"\nSaved as {conversation.id}")

    if args.out:
        export_to_json(scores.to_dict(), args.out)
        print(f"Results exported to {args.out}")


def cmd_insights(args):
    """Insights command."""
    history = ConversationHistory(args.history)
    _print_insights(history)


def cmd_history(args):
    """History command."""
    history = ConversationHistory(args.history)
    conversations = history.search(args.search)
    if not conversations:
        print("No conversations found")
        return

    for conv in conversations:
        s = conv.scores
        print(f"{conv.id}  {conv.created_at:%Y-%m-%d}  {conv.title}  "
              f"UserIQ {s.user_iq}  GPTIQ {s.gpt_iq}  ConversationIQ {s.conversation_iq}")

    stats = profile_stats(conversations)
    if stats:
        print(f"\nTotal: {stats.total}  Averages: {stats.avg_user_iq}/{stats.avg_gpt_iq}/{stats.avg_conversation_iq}"
              f"  Best: {stats.best_score} ({stats.best_conversation['date']:%Y-%m-%d})")
        print(f"Average ConversationIQ: first sessions {stats.initial_avg_iq}, recent sessions {stats.current_avg_iq}"
              f" ({stats.improvement:+d})")
        print(f"Strongest area: {stats.strongest_area}  Weakest area: {stats.weakest_area}")


def cmd_delete(args):
    """Delete command."""
    history = ConversationHistory(args.history)
    if history.delete(args.id):
        print(f"Deleted {args.id}")
    else:
        print(f"Conversation {args.id} not found")


def cmd_export(args):
    """Export command."""
    history = ConversationHistory(args.history)
    conversation = history.get(args.id)
    if conversation is None:
        print(f"Conversation {args.id} not found")
        return

    output = args.out or export_filename(conversation.title, args.format)
    if args.format == "csv":
        export_to_csv(conversation, output)
    else:
        export_to_json(prepare_export(conversation), output)
    print(f"Exported to {output}")


def cmd_ui(args):
    """UI command."""
    print("Launching GPTIQX UI...")
    try:
        run_streamlit_app()
    except subprocess.CalledProcessError as e:
        print(f"Failed to launch UI: {e}")
    except KeyboardInterrupt:
        print("\nUI stopped by user")


def build_parser():
    parser = argparse.ArgumentParser(description="GPTIQX - AI Conversation Intelligence")
    parser.add_argument('--history', default=None, help='Conversation history file')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Score a conversation transcript')
    analyze_parser.add_argument('transcript', nargs='?', default='-', help='Transcript file (default: stdin)')
    analyze_parser.add_argument('--title', default='New Analysis', help='Conversation title')
    analyze_parser.add_argument('--no-save', action='store_true', help='Do not store the result')
    analyze_parser.add_argument('--out', help='Output JSON file')

    # Insights command
    subparsers.add_parser('insights', help='Show insights for the latest conversation')

    # History command
    history_parser = subparsers.add_parser('history', help='List analyzed conversations')
    history_parser.add_argument('--search', default='', help='Filter by title')

    # Delete command
    delete_parser = subparsers.add_parser('delete', help='Delete a conversation')
    delete_parser.add_argument('id', help='Conversation id')

    # Export command
    export_parser = subparsers.add_parser('export', help='Export a conversation report')
    export_parser.add_argument('id', help='Conversation id')
    export_parser.add_argument('--format', choices=['json', 'csv'], default='json', help='Report format')
    export_parser.add_argument('--out', help='Output file (optional)')

    # UI command
    subparsers.add_parser('ui', help='Launch web UI')
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    commands = {
        'analyze': cmd_analyze,
        'insights': cmd_insights,
        'history': cmd_history,
        'delete': cmd_delete,
        'export': cmd_export,
        'ui': cmd_ui,
    }
    try:
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
    except AnalysisError as e:
        logger.error(f"Analysis failed ({e.status_code}): {e.message}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)
