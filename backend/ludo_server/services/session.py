"""Command handling for game sessions.

Every inbound command, from a connected client or from a bot acting as
one, comes through ``GameSession``: it is validated against the room's
state and turn, applied, and the resulting room snapshot is pushed to the
room through the broadcaster. Errors are raised as ``GameError`` for the
transport layer to report back to whoever issued the command.
"""
import logging
from typing import List, Optional, Tuple

from ludo_server.errors import (
    GameAlreadyStarted,
    InvalidMove,
    NotEnoughPlayers,
    NotPlaying,
    NotYourTurn,
    RoomNotFound,
)
from ludo_server.models import GameState, Player, Room
from ludo_server.registry import ConnectionMap, RoomRegistry, normalize_room_id
from ludo_server.services import turns
from ludo_server.services.bots import BotAgent
from ludo_server.services.dice import Dice
from ludo_server.services.movement import has_won, movable_tokens, perform_move


class GameSession:
    def __init__(
        self,
        registry: RoomRegistry,
        broadcaster,
        scheduler,
        strategy,
        dice: Dice = None,
        connections: ConnectionMap = None,
        min_players: int = 2,
        think_delay: float = 1.5,
        move_delay: float = 1.0,
        logger=None,
    ):
        self.registry = registry
        self.broadcaster = broadcaster
        self.dice = dice or Dice()
        self.connections = connections or ConnectionMap()
        self.min_players = min_players
        self.logger = logger or logging.getLogger(__name__)
        self.bots = BotAgent(self, scheduler, strategy, think_delay=think_delay, move_delay=move_delay)

    # ---- helpers ----

    def _publish(self, room: Room, event: str) -> None:
        self.broadcaster.to_room(room.id, event, room.to_dict())

    def _authorize(self, sid: Optional[str], room_id, player_id: str) -> None:
        # sid is None for commands issued by the server itself (bots)
        if sid is not None and not self.connections.owns(sid, room_id, player_id):
            raise NotYourTurn('You can only act for your own player')

    def _require_turn(self, room: Room, player_id: str) -> Player:
        if room.state != GameState.PLAYING:
            raise NotPlaying()
        player = turns.current_player(room)
        if player is None or player.id != player_id:
            raise NotYourTurn()
        return player

    def _declare_winner(self, room: Room, player: Player) -> None:
        room.state = GameState.FINISHED
        room.winner = player
        room.turn_serial += 1
        self.logger.info(f"[game-over] room={room.id} winner={player.name} color={player.color.value}")
        self._publish(room, 'gameOver')

    def _after_turn_change(self, room: Room) -> None:
        self._publish(room, 'gameUpdate')
        nxt = turns.current_player(room)
        if nxt is not None and nxt.is_bot:
            self.bots.begin_turn(room)

    # ---- lobby ----

    def create_room(self, sid: Optional[str], player_name: str = '') -> Tuple[Room, Player]:
        room, player = self.registry.create_room(player_name)
        if sid is not None:
            self.connections.bind(sid, room.id, player.id)
            self.broadcaster.enter(sid, room.id)
            self.broadcaster.to_connection(sid, 'joined', {'roomId': room.id, 'playerId': player.id})
            self.broadcaster.to_connection(sid, 'roomCreated', room.to_dict())
        self.logger.info(f"[room-created] room={room.id} player={player.id} name={player.name}")
        return room, player

    def join_room(self, sid: Optional[str], room_id, player_name: str = '') -> Tuple[Room, Player]:
        room, player = self.registry.join_room(room_id, player_name)
        with room.lock:
            if sid is not None:
                self.connections.bind(sid, room.id, player.id)
                self.broadcaster.enter(sid, room.id)
                self.broadcaster.to_connection(sid, 'joined', {'roomId': room.id, 'playerId': player.id})
            self.logger.info(f"[room-joined] room={room.id} player={player.id} color={player.color.value}")
            self._publish(room, 'roomJoined')
        return room, player

    def add_bot(self, room_id) -> Tuple[Room, Player]:
        room, bot = self.registry.add_bot(room_id)
        with room.lock:
            self.logger.info(f"[bot-added] room={room.id} bot={bot.name} color={bot.color.value}")
            self._publish(room, 'roomJoined')
        return room, bot

    def start_game(self, room_id, requested_by: Optional[str] = None) -> Room:
        with self.registry.locked(room_id) as room:
            if room.state != GameState.WAITING:
                raise GameAlreadyStarted()
            if requested_by is not None and room.player(requested_by) is None:
                raise NotYourTurn('Only players in this room can start it')
            if len(room.players) < self.min_players:
                raise NotEnoughPlayers(f'Need at least {self.min_players} players to start')
            room.state = GameState.PLAYING
            turns.reset(room)
            self.logger.info(f"[game-started] room={room.id} players={len(room.players)}")
            self._after_turn_change(room)
            return room

    # ---- turns ----

    def roll_dice(self, room_id, player_id: str, sid: Optional[str] = None, auto_forfeit: bool = True) -> int:
        """Roll for the player on turn.

        With ``auto_forfeit`` a roll that leaves no token movable hands the
        turn on straight away.
        """
        with self.registry.locked(room_id) as room:
            player = self._require_turn(room, player_id)
            self._authorize(sid, room.id, player_id)
            if room.last_roll:
                raise InvalidMove('Move a token before rolling again')
            value = self.dice.roll()
            turns.record_roll(room, value)
            self.logger.debug(f"[roll] room={room.id} player={player.name} value={value}")
            self.broadcaster.to_room(room.id, 'diceRolled', {'room': room.to_dict(), 'value': value})
            if auto_forfeit and not movable_tokens(player, value):
                self.logger.info(f"[forfeit] room={room.id} player={player.name} value={value}")
                turns.forfeit(room)
                self._after_turn_change(room)
            return value

    def move_token(self, room_id, player_id: str, token_index, sid: Optional[str] = None):
        with self.registry.locked(room_id) as room:
            player = self._require_turn(room, player_id)
            self._authorize(sid, room.id, player_id)
            if not room.last_roll:
                raise InvalidMove('Roll the dice first')
            result = perform_move(room, player, token_index, room.last_roll)
            if result is None:
                raise InvalidMove()
            self.logger.info(
                f"[move] room={room.id} player={player.name} token={result.token_index} "
                f"{result.from_position}->{result.to_position} captures={len(result.captures)}"
            )
            self._publish(room, 'tokenMoved')
            if has_won(player):
                self._declare_winner(room, player)
                return result
            turns.finish_move(room)
            self._after_turn_change(room)
            return result

    def pass_turn(self, room_id, player_id: str) -> None:
        """Give up a rolled value no token can use."""
        with self.registry.locked(room_id) as room:
            player = self._require_turn(room, player_id)
            if not room.last_roll or movable_tokens(player, room.last_roll):
                raise InvalidMove('A token can still be moved')
            turns.forfeit(room)
            self._after_turn_change(room)

    # ---- connections ----

    def disconnect(self, sid: str) -> List[Room]:
        """Remove the connection's player from every room it sat in.

        Returns the rooms that are still open afterwards.
        """
        remaining = []
        for room_id, player_id in self.connections.release(sid):
            room = self._leave(sid, room_id, player_id)
            if room is not None:
                remaining.append(room)
        return remaining

    def _leave(self, sid: str, room_id: str, player_id: str) -> Optional[Room]:
        try:
            with self.registry.locked(room_id) as room:
                serial = room.turn_serial
                was_playing = room.state == GameState.PLAYING
                remaining = self.registry.remove_player(room_id, player_id)
                if remaining is None:
                    self.logger.info(f"[room-closed] room={room_id} last player left")
                    return None
                self.logger.info(f"[player-left] room={room_id} player={player_id} state={remaining.state.value}")
                if was_playing and remaining.state == GameState.FINISHED:
                    self._publish(remaining, 'gameOver')
                elif remaining.state == GameState.PLAYING and remaining.turn_serial != serial:
                    self._after_turn_change(remaining)
                elif remaining.state == GameState.PLAYING:
                    self._publish(remaining, 'gameUpdate')
                else:
                    self._publish(remaining, 'roomJoined')
                return remaining
        except RoomNotFound:
            self.logger.info(f"[disconnect] sid={sid} room={normalize_room_id(room_id)} already gone")
            return None
