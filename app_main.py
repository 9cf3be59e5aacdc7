"""Application entry point for the QuizShuffle server."""

from __future__ import annotations

import argparse
from pathlib import Path
import socket

from quiz_shuffle.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_shuffle.core.quiz_importer import load_quiz_from_file
from quiz_shuffle.core.quiz_manager import QuizManager
from quiz_shuffle.server.api_server import start_api_server
from quiz_shuffle.utils.logging_config import configure_logging


def _determine_participant_url(port: int) -> str:
    """Best-effort determination of the local IP for the participant-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the QuizShuffle quiz server.")
    parser.add_argument("quiz", nargs="?", type=Path, help="Quiz JSON file to load and start.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible shuffles.")
    return parser.parse_args()


def main() -> None:
    """Initialize logging, optionally start a quiz, and serve the API."""
    args = _parse_args()
    logger = configure_logging()
    logger.info("Starting QuizShuffle server...")

    quiz_manager = QuizManager()
    quiz_manager.set_shuffle_seed(args.seed)
    if args.quiz is not None:
        quiz = quiz_manager.register_quiz(load_quiz_from_file(args.quiz))
        quiz_manager.start_session(quiz.quiz_id)

    logger.info("Participant API available at %s", _determine_participant_url(args.port))
    start_api_server(quiz_manager=quiz_manager, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
