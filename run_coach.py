#!/usr/bin/env python3
"""
Run a coaching session in the terminal

Commands:
  /confirm            generate pillars for the topic
  /pillars [title]    list pillars (sorted by category, or by title)
  /pillar <id>        select a pillar
  /variations         list lesson variations
  /variation <id>     select a variation
  /questions          list audience questions
  /regenerate         regenerate pillars
  /lang <en|ko>       switch language
  /export [path]      print or write the strategy markdown
  /quit
Anything else is sent as a reply to the mentor.
"""

import argparse
import asyncio
import logging
from pathlib import Path

from topical_authority.backends import create_backend
from topical_authority.config import PROVIDERS, load_settings
from topical_authority.errors import CoachError
from topical_authority.export import export_filename
from topical_authority.gateway import GenerationGateway
from topical_authority.orchestrator import FunnelOrchestrator
from topical_authority.state import new_session


def print_messages(messages):
    for msg in messages:
        speaker = "You" if msg.role == "user" else "Coach"
        print(f"\n[{speaker}] {msg.text}")


def print_status(orchestrator: FunnelOrchestrator):
    session = orchestrator.session
    print(f"\n--- stage: {session.stage.value} | topic: {session.topic or '-'} | language: {session.language} ---")


async def handle_command(orchestrator: FunnelOrchestrator, line: str) -> bool:
    """Run one input line. Returns False when the session should end."""
    session = orchestrator.session
    command, _, arg = line.partition(" ")
    arg = arg.strip()

    if command == "/quit":
        return False
    elif command == "/confirm":
        print_messages(await orchestrator.confirm_topic())
    elif command == "/regenerate":
        print_messages(await orchestrator.regenerate_pillars())
    elif command == "/pillars":
        for pillar in orchestrator.sorted_pillars(arg or "category"):
            print(f"  {pillar.id:>6}  [{pillar.category}] {pillar.title}")
    elif command == "/pillar":
        print_messages(await orchestrator.select_pillar(arg))
    elif command == "/variations":
        for variation in session.variations:
            print(f"  {variation.id:>6}  ({variation.angle}) {variation.title}")
    elif command == "/variation":
        print_messages(await orchestrator.select_variation(arg))
    elif command == "/questions":
        for i, question in enumerate(session.questions, start=1):
            print(f"  {i:>2}. {question.question}  <{question.intent}>")
    elif command == "/lang":
        orchestrator.set_language(arg)
    elif command == "/export":
        document = orchestrator.export_strategy()
        if arg:
            path = Path(arg)
            if path.is_dir():
                path = path / export_filename(session)
            path.write_text(document, encoding="utf-8")
            print(f"Saved strategy to {path}")
        else:
            print(document)
    else:
        print_messages(await orchestrator.submit_reply(line))
    return True


async def run_session(orchestrator: FunnelOrchestrator):
    print_messages(orchestrator.session.messages)
    while True:
        print_status(orchestrator)
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        try:
            if not await handle_command(orchestrator, line):
                break
        except (CoachError, ValueError) as e:
            print(f"✗ {e}")


def main():
    parser = argparse.ArgumentParser(description='Build a topical authority content strategy')
    parser.add_argument('--provider', choices=sorted(PROVIDERS), help='AI provider to use')
    parser.add_argument('--model', help='Specific model name')
    parser.add_argument('--language', choices=['en', 'ko'], default='en', help='Session language')
    args = parser.parse_args()

    settings = load_settings()
    if args.provider:
        settings.provider = args.provider
        settings.model = None
    if args.model:
        settings.model = args.model
    logging.basicConfig(level=settings.log_level)

    gateway = GenerationGateway(create_backend(settings), mentor_temperature=settings.mentor_temperature)
    orchestrator = FunnelOrchestrator(new_session(args.language), gateway)
    asyncio.run(run_session(orchestrator))


if __name__ == '__main__':
    main()
