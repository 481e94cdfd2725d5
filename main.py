"""
Command line runner: play a pass-and-play round in the terminal, or serve the web UI.
"""

import argparse
import time
from typing import Optional

from dotenv import load_dotenv

from impostor.catalog import CardSource
from impostor.config import GameMode, Settings, configure_logging, load_settings
from impostor.exceptions import ImpostorGameError
from impostor.game import ImpostorGame
from impostor.phases import PhaseState, format_clock

CLEAR_SCREEN = "\n" * 40


class TerminalRound:
    """Drives one round of an ImpostorGame from terminal input."""

    def __init__(self, game: ImpostorGame, input_fn=None, sleep_fn=None):
        self.game = game
        self.input = input_fn or input
        self.sleep = sleep_fn or time.sleep

    def play(self, players_count: int, impostors_count: int, mode: str, card_source: str) -> bool:
        """Play one round. Returns False if it was aborted with Ctrl-C before the discussion."""
        self.game.select_mode(mode)
        session = self.game.start_session(players_count, impostors_count, mode=mode,
                                          card_source=card_source)

        print("=" * 60)
        print(f"IMPOSTOR - {session.mode.value}")
        print("=" * 60)
        print(f"Players: {session.players_count}  Impostors: {len(session.get_impostors())}")

        try:
            while self.game.phase in (PhaseState.PASS, PhaseState.REVEAL):
                if self.game.phase == PhaseState.PASS:
                    seat = self.game.snapshot()["currentSeatNumber"]
                    self.input(f"\nPass the device to Player {seat}. Press Enter when ready...")
                    self.game.ready()
                else:
                    self._reveal()
        except KeyboardInterrupt:
            self.game.abort()
            print("\nRound aborted.")
            return False

        self._discussion()
        self._show_result()
        return True

    def _reveal(self) -> None:
        view = self.game.snapshot()["reveal"]
        print()
        if view["card"] is None:
            print(">>> YOU ARE THE IMPOSTOR <<<")
            print(view["message"])
        else:
            card = view["card"]
            print(f">>> Your card: {card['name']} {card['displayRef']}")

        if self.game.machine.is_timed:
            while self.game.phase == PhaseState.REVEAL:
                self.sleep(1)
                self.game.tick()
        else:
            self.input("Press Enter once you've seen it...")
            self.game.seen()
        print(CLEAR_SCREEN)

    def _discussion(self) -> None:
        print("=" * 60)
        print("GAME IN PROGRESS - discuss and find the impostor!")
        print("=" * 60)
        if not self.game.machine.is_timed:
            started = time.monotonic()
            self.input("Press Enter to reveal the impostors...")
            print(f"Round time: {format_clock(int(time.monotonic() - started))}")
            self.game.reveal_impostors()
            return

        try:
            while self.game.phase == PhaseState.PLAYING:
                remaining = self.game.machine.remaining_seconds or 0
                print(f"\rTime left: {format_clock(remaining)}", end="", flush=True)
                self.sleep(1)
                self.game.tick()
        except KeyboardInterrupt:
            self.game.reveal_impostors()
        print()

    def _show_result(self) -> None:
        result = self.game.snapshot()["result"]
        print("=" * 60)
        print("GAME OVER!")
        print(result["headline"])
        for seat in result["impostorSeats"]:
            print(f"  Player {seat}")
        secret = result["secretCard"]
        print(f"The secret card was: {secret['name']} {secret['displayRef']}")
        secondary = result["secondaryCard"]
        if secondary:
            label = "The impostor's card" if result["mode"] == GameMode.SPY.value else "The second card"
            print(f"{label} was: {secondary['name']} {secondary['displayRef']}")
        print("=" * 60)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command line values win over the YAML config."""
    if args.seed is not None:
        settings.random_seed = args.seed
    if args.source is not None:
        settings.card_source = args.source
    if args.custom_cards is not None:
        settings.custom_cards_path = args.custom_cards
    if args.host is not None:
        settings.host = args.host
    if args.port is not None:
        settings.port = args.port
    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Impostor party game")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML config file")
    parser.add_argument("--players", "-p", type=int, default=None,
                        help="Number of players (3-10)")
    parser.add_argument("--impostors", "-i", type=int, default=None,
                        help="Number of impostors (at least 1, fewer than players)")
    parser.add_argument("--mode", "-m", type=str, default=None,
                        choices=[m.value for m in GameMode],
                        help="Game mode")
    parser.add_argument("--source", type=str, default=None,
                        choices=[s.value for s in CardSource],
                        help="Where the cards come from")
    parser.add_argument("--custom-cards", type=str, default=None,
                        help="Path of the custom cards JSON file")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for a reproducible round")
    parser.add_argument("--serve", action="store_true",
                        help="Run the web server instead of a terminal round")
    parser.add_argument("--host", type=str, default=None)
    parser.add_argument("--port", type=int, default=None)
    return parser


def main(argv: Optional[list] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    settings = apply_overrides(load_settings(args.config), args)
    configure_logging(settings.log_level)

    game = ImpostorGame(settings=settings)

    if args.serve:
        from impostor.web.game_server import GameServer
        GameServer(game, port=settings.port, host=settings.host).start()
        return 0

    players = args.players if args.players is not None else settings.default_players
    impostors = args.impostors if args.impostors is not None else settings.default_impostors
    mode = args.mode or settings.default_mode

    try:
        finished = TerminalRound(game).play(players, impostors, mode, settings.card_source)
    except ImpostorGameError as e:
        print(f"Could not start the game: {e.message}")
        return 1
    return 0 if finished else 130


if __name__ == "__main__":
    raise SystemExit(main())
