"""
Memcare CLI - Command-line interface for the engine.

Usage:
    memcare play [--difficulty N] [--seed S]   Play Memory Match in the terminal
    memcare catalog <stage>                    Show the games for a patient stage
    memcare serve [--host H] [--port P]        Run the REST API
"""

import argparse
import logging
import os
import random
import sys
import time


def configure_logging(level: str | None = None):
    """Configure root logging from the flag or MEMCARE_LOG_LEVEL."""
    level_name = (level or os.getenv("MEMCARE_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Memcare - Memory Match engine",
        prog="memcare",
    )
    parser.add_argument("--log-level", help="Logging level (default: MEMCARE_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play Memory Match in the terminal")
    play_parser.add_argument("--difficulty", type=int, default=1, help="Difficulty 1-3")
    play_parser.add_argument("--seed", type=int, help="Shuffle seed")
    play_parser.add_argument("--patient", default="cli", help="Patient id")

    # Catalog command
    catalog_parser = subparsers.add_parser("catalog", help="Show games for a patient stage")
    catalog_parser.add_argument("stage", help="early, moderate or advanced")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def render_board(engine) -> str:
    """Text grid, four cards per row, face-down cards shown as their index."""
    cells = []
    for card in engine.cards:
        if card.is_flipped or card.is_matched:
            cells.append(f" {card.value} ")
        else:
            cells.append(f"[{card.id:2d}]")
    rows = [" ".join(cells[i:i + 4]) for i in range(0, len(cells), 4)]
    return "\n".join(rows)


def cmd_play(args):
    """Play one board, then offer a replay at the adapted difficulty."""
    from .engine_core import ManualScheduler
    from .session import SessionManager

    scheduler = ManualScheduler()
    manager = SessionManager(
        scheduler_factory=lambda: scheduler,
        rng_factory=lambda: random.Random(args.seed),
    )
    session = manager.create_session(args.patient, difficulty=args.difficulty)
    engine = session.engine

    if not engine.ready:
        print("Error: board could not be built")
        sys.exit(1)

    print(f"Memory Match - difficulty {engine.difficulty}, {engine.pair_count} pairs")
    while True:
        print()
        print(render_board(engine))
        print(f"Moves: {engine.moves}")

        if engine.won:
            outcome = session.last_outcome
            print(f"\nYou won! Score: {engine.score}, time: {engine.time_taken}s")
            if outcome and outcome.next_difficulty != outcome.difficulty:
                print(f"Next difficulty: {outcome.next_difficulty}")
            answer = input("Play again? [y/N] ").strip().lower()
            if answer != "y":
                break
            session.replay()
            continue

        try:
            raw = input("Card index (q to quit): ").strip()
        except EOFError:
            break
        if raw.lower() == "q":
            break
        try:
            index = int(raw)
        except ValueError:
            print(f"Not a number: {raw}")
            continue

        result = session.click(index)
        if not result.success:
            print(f"Ignored: {result.error}")
            continue

        if result.matched is False:
            print(render_board(engine))
            print("No match")
            time.sleep(engine.mismatch_delay)
            scheduler.advance(engine.mismatch_delay)

    manager.end_session(session.session_id)


def cmd_catalog(args):
    """Show the games offered at a stage."""
    from .games import games_for_stage, initial_difficulty

    print(f"Stage: {args.stage} (starting difficulty {initial_difficulty(args.stage)})")
    for game in games_for_stage(args.stage):
        marker = "" if game.playable else " (coming soon)"
        print(f"  {game.game_id:14s} {game.title}{marker} - {game.description}")


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("memcare.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
