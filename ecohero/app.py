"""Application entry point for the EcoHero progression engine."""

import logging
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication

from ecohero.core.content import ContentRepository, load_content
from ecohero.core.errors import ProgressResetError
from ecohero.core.game import GameProgress
from ecohero.core.storage import ProgressFile


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_summary(game: GameProgress) -> str:
    """Render the profile screen numbers as plain text."""
    player = game.player
    content: ContentRepository = game.content
    lines = [
        f"Player: {player.name}",
        f"Total stars: {game.total_stars}",
        f"Green score: {player.green_score}",
        f"Correct answers: {player.total_correct_answers}",
        "",
        "Worlds:",
    ]
    for state in game.world_states():
        lock = "open" if state.unlocked else f"locked ({state.world.stars_to_unlock} stars)"
        lines.append(
            f"  {state.world.id} {state.world.title}: {state.stars}/{state.max_stars} stars, "
            f"{state.completed_levels}/{state.total_levels} levels, {lock}"
        )
    names = {badge.id: badge.name or badge.id for badge in content.badges()}
    lines.append("")
    if player.badges:
        lines.append("Badges: " + ", ".join(names.get(b, b) for b in player.badges))
    else:
        lines.append("Badges: none yet")
    return "\n".join(lines)


def run(argv: Optional[List[str]] = None) -> None:
    """Load content and saved progress, optionally reset it, and print the profile summary."""
    configure_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    app = QCoreApplication.instance() or QCoreApplication([sys.argv[0]])
    app.setApplicationName("EcoHero")

    game = GameProgress(load_content(), ProgressFile())
    if "--reset" in args:
        try:
            game.reset_progress()
        except ProgressResetError as e:
            logging.error("Progress was reset but the saved file could not be cleared: %s", e)
            sys.exit(1)

    print(format_summary(game))
    game.flush()


if __name__ == "__main__":
    run()
