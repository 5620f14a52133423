# scripts/smoke.py
"""
Smoke Test Script for the Quizely generation path.

Runs one real definition request through a `FlashcardSession`, then commits
the result as a flashcard, so the whole create flow is exercised against the
live Gemini endpoint.

Usage
-----
1. Test with the default term:
    $ python scripts/smoke.py

2. Test with your own term and model alias:
    $ python scripts/smoke.py --term "photosynthesis" --model lite
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from quizely.core.session import FlashcardSession
from quizely.llm.client import GenerationClient

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")
else:
    print("⚠️  No .env file found; requests go out without GEMINI_API_KEY.")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

DEFAULT_TERM = "spaced repetition"


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run the Quizely smoke test")
    parser.add_argument("--term", "-t", default=DEFAULT_TERM, help="Term to define")
    parser.add_argument("--model", "-m", default=None, help="Model alias or id override")
    args = parser.parse_args()

    client = GenerationClient.from_settings()
    if args.model:
        client.model_alias = args.model
    print(f"🚀 POST {client.endpoint().split('?')[0]}")

    session = FlashcardSession(client)
    session.edit_draft_term(args.term)
    session.generate_definition()

    if session.error_message:
        print(f"❌ {session.error_message}")
        sys.exit(1)

    card = session.add_flashcard()
    if card is None:
        print(f"❌ {session.error_message}")
        sys.exit(1)

    print("\n=== Flashcard ===")
    print(f"Term:       {card.term}")
    print(f"Definition: {card.definition.strip()}")


if __name__ == "__main__":
    main()
