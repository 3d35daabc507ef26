"""Autonomous players.

A bot's turn is paced like a person's: think, roll, pause, move. Each step
is a separate scheduled task holding only the room id, the bot id and the
room's ``turn_serial`` at scheduling time. When a step fires it re-resolves
the room through the registry and quietly gives up if the room is gone, the
game is no longer running, or the turn has moved on in the meantime.
"""
from ludo_server.errors import GameError, RoomNotFound
from ludo_server.models import GameState, Room
from ludo_server.services import turns
from ludo_server.services.movement import movable_tokens


class BotAgent:
    def __init__(self, session, scheduler, strategy, think_delay: float = 1.5, move_delay: float = 1.0):
        self.session = session
        self.scheduler = scheduler
        self.strategy = strategy
        self.think_delay = think_delay
        self.move_delay = move_delay

    @property
    def logger(self):
        return self.session.logger

    def begin_turn(self, room: Room) -> None:
        bot = turns.current_player(room)
        if bot is None or not bot.is_bot or room.state != GameState.PLAYING:
            return
        self.logger.debug(f"[bot-turn] room={room.id} bot={bot.name} serial={room.turn_serial}")
        self.scheduler.schedule(self.think_delay, self.roll_step, room.id, bot.id, room.turn_serial)

    def _still_current(self, room: Room, bot_id: str, serial: int) -> bool:
        if room.state != GameState.PLAYING:
            reason = f'state={room.state.value}'
        elif room.turn_serial != serial:
            reason = f'serial {serial}->{room.turn_serial}'
        elif getattr(turns.current_player(room), 'id', None) != bot_id:
            reason = 'not on turn'
        else:
            return True
        self.logger.info(f"[bot-abort] room={room.id} bot={bot_id} reason={reason}")
        return False

    def roll_step(self, room_id: str, bot_id: str, serial: int) -> None:
        try:
            with self.session.registry.locked(room_id) as room:
                if not self._still_current(room, bot_id, serial):
                    return
                value = self.session.roll_dice(room_id, bot_id, auto_forfeit=False)
                self.logger.info(f"[bot-roll] room={room_id} bot={bot_id} value={value}")
        except RoomNotFound:
            self.logger.info(f"[bot-abort] room={room_id} bot={bot_id} reason=room gone")
            return
        except GameError as exc:
            self.logger.info(f"[bot-abort] room={room_id} bot={bot_id} reason={exc.code}")
            return
        self.scheduler.schedule(self.move_delay, self.move_step, room_id, bot_id, serial)

    def move_step(self, room_id: str, bot_id: str, serial: int) -> None:
        try:
            with self.session.registry.locked(room_id) as room:
                if not self._still_current(room, bot_id, serial) or not room.last_roll:
                    return
                bot = room.player(bot_id)
                movable = movable_tokens(bot, room.last_roll)
                if not movable:
                    self.logger.info(f"[bot-pass] room={room_id} bot={bot_id} roll={room.last_roll}")
                    self.session.pass_turn(room_id, bot_id)
                    return
                token = self.strategy.choose(room, bot, room.last_roll, movable)
                self.session.move_token(room_id, bot_id, token.index)
        except RoomNotFound:
            self.logger.info(f"[bot-abort] room={room_id} bot={bot_id} reason=room gone")
        except GameError as exc:
            self.logger.info(f"[bot-abort] room={room_id} bot={bot_id} reason={exc.code}")
