from __future__ import annotations
import argparse
from typing import List, Tuple

import pygame

from ..config import Settings, load_settings
from ..engine import rules
from ..engine.game import Game
from ..engine.state import Move, Position, WallSegment
from ..players.agents.base import Agent, GameView
from ..players.factory import AgentFactory
from ..players.hotseat import HotseatController
from ..stats import MatchStatistics

CELL_SIZE = 60
PADDING = 40
BG_COLOR = (30, 30, 35)
GRID_COLOR = (180, 180, 180)
WALL_COLOR = (120, 60, 60)
PLAYER_COLORS = [
    (50, 160, 255),   # P1: Blue
    (255, 140, 60),   # P2: Orange
    (60, 220, 100),   # P3: Green
    (220, 60, 220),   # P4: Purple
]
HIGHLIGHT_COLOR = (200, 220, 60)
TEXT_COLOR = (240, 240, 240)
ERROR_COLOR = (255, 110, 110)

# Number-key quick restarts
HOTKEY_SPECS = {
    pygame.K_1: ["human", "human"],
    pygame.K_2: ["human", "ai:1"],
    pygame.K_3: ["human", "ai:2"],
    pygame.K_4: ["human", "ai:3"],
    pygame.K_5: ["ai:2", "ai:3"],
    pygame.K_6: ["human", "llm"],
    pygame.K_0: ["human", "ai:1", "ai:2", "ai:3"],
}


class PygameHotseatUI:
    def __init__(self, player_specs: List[str] | None = None, settings: Settings | None = None):
        pygame.init()
        self.settings = settings or load_settings()
        self.stats = MatchStatistics()
        self.font = pygame.font.SysFont("consolas", 18)
        size = self.settings.board_size
        w = PADDING * 2 + CELL_SIZE * size
        h = w + PADDING
        self.screen = pygame.display.set_mode((w, h))
        pygame.display.set_caption("Quoridor Hotseat")
        self.clock = pygame.time.Clock()
        self.message = ""
        self.running = True
        self.wall_orientation_horizontal = True  # toggle with space
        self.restart_game(player_specs or ["human", "human"])

    def restart_game(self, player_specs: List[str]):
        if len(player_specs) not in (2, 4):
            print(f"Warning: {len(player_specs)} players not supported. Defaulting to 2.")
            player_specs = ["human", "human"]

        self.agents: List[Agent] = []
        for i, spec in enumerate(player_specs):
            try:
                agent = AgentFactory.create(spec, self.settings)
            except ValueError as e:
                print(f"Error creating agent for '{spec}': {e}. Fallback to Random.")
                agent = AgentFactory.create("random", self.settings)
            if agent.is_human and agent.name == "Human":
                agent.name = f"Player {i + 1}"
            self.agents.append(agent)

        chooser = rules.first_option if self.settings.diagonal_policy == "first" else None
        self.game = Game(
            num_players=len(self.agents),
            size=self.settings.board_size,
            names=[f"{a.name} #{i + 1}" for i, a in enumerate(self.agents)],
            diagonal_choice=chooser,
            stats=self.stats,
            max_actions=self.settings.max_actions,
        )
        self.controller = HotseatController(self.game, print_snapshot=self.settings.print_snapshot)
        self._sync_player_identities()
        self.controller.refresh_moves()
        self.message = ""

    @property
    def board(self):
        return self.game.board

    def board_to_pixel(self, pos: Position) -> Tuple[int, int]:
        return PADDING + pos.col * CELL_SIZE, PADDING * 2 + pos.row * CELL_SIZE

    def pixel_to_cell(self, mx: int, my: int) -> Tuple[int, int] | None:
        if mx < PADDING or my < PADDING * 2:
            return None
        return (my - PADDING * 2) // CELL_SIZE, (mx - PADDING) // CELL_SIZE

    def _wall_rect(self, wall: WallSegment) -> pygame.Rect:
        base_x, base_y = self.board_to_pixel(wall.position)
        if wall.horizontal:
            return pygame.Rect(base_x, base_y + CELL_SIZE - 6, CELL_SIZE * 2, 12)
        return pygame.Rect(base_x + CELL_SIZE - 6, base_y, 12, CELL_SIZE * 2)

    def draw_grid(self):
        n = self.board.size
        for i in range(n + 1):
            y = PADDING * 2 + i * CELL_SIZE
            x = PADDING + i * CELL_SIZE
            pygame.draw.line(self.screen, GRID_COLOR, (PADDING, y), (PADDING + n * CELL_SIZE, y), 2)
            pygame.draw.line(self.screen, GRID_COLOR, (x, PADDING * 2), (x, PADDING * 2 + n * CELL_SIZE), 2)

    def draw_pawns(self):
        for idx, pawn in self.board.pawns.items():
            x, y = self.board_to_pixel(pawn)
            rect = pygame.Rect(x + 8, y + 8, CELL_SIZE - 16, CELL_SIZE - 16)
            pygame.draw.rect(self.screen, PLAYER_COLORS[idx % len(PLAYER_COLORS)], rect, border_radius=8)
            if idx == self.game.current_player and not self.game.is_over:
                pygame.draw.rect(self.screen, (255, 255, 255), rect, 2, border_radius=8)

    def draw_walls(self):
        for wall in self.board.walls:
            pygame.draw.rect(self.screen, WALL_COLOR, self._wall_rect(wall), border_radius=3)

    def _human_to_move(self) -> bool:
        return not self.game.is_over and self.active_agent().is_human

    def draw_wall_ghost(self):
        if not self._human_to_move():
            return
        keys = pygame.key.get_pressed()
        if not (keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT]):
            return
        if self.game.walls_remaining(self.game.current_player) <= 0:
            return
        cell = self.pixel_to_cell(*pygame.mouse.get_pos())
        if cell is None:
            return
        row, col = cell
        candidate = WallSegment(row, col, self.wall_orientation_horizontal)
        if not self.board.wall_in_bounds(candidate):
            return
        legal = self.controller.is_legal(Move(kind="wall", wall=candidate))
        color = (200, 120, 120, 120) if legal else (255, 50, 50, 120)
        rect = self._wall_rect(candidate)
        ghost_surface = pygame.Surface(rect.size, pygame.SRCALPHA)
        ghost_surface.fill(color)
        self.screen.blit(ghost_surface, rect.topleft)

    def draw_highlights(self):
        if not self._human_to_move():
            return
        for move in self.controller.legal_moves:
            if move.kind == "pawn" and move.to:
                x, y = self.board_to_pixel(move.to)
                pygame.draw.rect(
                    self.screen,
                    HIGHLIGHT_COLOR,
                    pygame.Rect(x + 20, y + 20, CELL_SIZE - 40, CELL_SIZE - 40),
                    2,
                )

    def draw_status(self):
        game = self.game
        if game.is_over:
            outcome = game.status
            if outcome.winner is not None:
                status = f"Winner: {game.names[outcome.winner]} - ESC to quit, 1-6/0 to restart"
            else:
                status = f"Game {outcome.outcome} - ESC to quit, 1-6/0 to restart"
        else:
            p = game.current_player
            status = (
                f"{game.names[p]} | Walls: {game.walls_remaining(p)} | "
                f"{'H' if self.wall_orientation_horizontal else 'V'}"
            )
        self.screen.blit(self.font.render(status, True, TEXT_COLOR), (PADDING, 8))
        if self.message:
            self.screen.blit(self.font.render(self.message, True, ERROR_COLOR), (PADDING, 8 + PADDING // 2))

    def active_agent(self) -> Agent:
        return self.agents[self.game.current_player]

    def _sync_player_identities(self):
        metas = []
        for idx, ag in enumerate(self.agents):
            metas.append(
                {
                    "id": idx,
                    "name": self.game.names[idx],
                    "role": "human" if ag.is_human else "bot",
                }
            )
        self.controller.set_player_identities(metas)

    def handle_click(self, pos):
        if not self._human_to_move():
            return
        cell = self.pixel_to_cell(*pos)
        if cell is None:
            return
        row, col = cell
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT]:
            move = Move.place(row, col, "H" if self.wall_orientation_horizontal else "V")
        else:
            move = Move.pawn(Position(row, col))
        agent = self.active_agent()
        agent.set_pending(move)  # type: ignore[attr-defined]
        self.apply_agent_move(agent)

    def toggle_orientation(self):
        self.wall_orientation_horizontal = not self.wall_orientation_horizontal

    def apply_agent_move(self, agent: Agent):
        if self.game.is_over:
            return
        move = agent.choose_move(GameView(self.game))
        if self.controller.attempt_move(move):
            self.message = ""
            return
        rejection = self.game.last_rejection
        self.message = rejection.message if rejection else "Illegal move."
        if not agent.is_human:
            # Bots only pick from the legal set; anything else is a bug worth seeing.
            print(f"Illegal move attempted by {agent.name}: {move} ({self.message})")
            self.running = False

    def maybe_ai_turn(self):
        if self.game.is_over:
            return
        agent = self.active_agent()
        if not agent.is_human:
            self.apply_agent_move(agent)

    def quit(self):
        self.game.abort()
        self.running = False

    def loop(self):
        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.quit()
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        self.quit()
                    elif event.key == pygame.K_SPACE:
                        self.toggle_orientation()
                    elif event.key in HOTKEY_SPECS:
                        self.game.abort()
                        self.restart_game(HOTKEY_SPECS[event.key])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)

            self.screen.fill(BG_COLOR)
            self.draw_grid()
            self.draw_highlights()
            self.draw_pawns()
            self.draw_walls()
            self.draw_wall_ghost()
            self.draw_status()
            pygame.display.flip()
            self.maybe_ai_turn()
            self.clock.tick(30)
        print(self.stats.report())
        pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="Quoridor Hotseat")
    parser.add_argument("players", nargs="*", help="Player specs (e.g. human ai:3 random llm:gpt-4o)")
    parser.add_argument("--size", type=int, help="Board size (odd)")
    args = parser.parse_args()

    settings = load_settings()
    if args.size is not None:
        settings.board_size = args.size
    ui = PygameHotseatUI(args.players or ["human", "human"], settings.validate())
    ui.loop()


if __name__ == "__main__":
    main()
