"""Tests for normal-mode command dispatch in ModalEngine."""

from __future__ import annotations

from navim.config import NavimConfig
from navim.core.keymap import Action, Binding, default_binding_table
from navim.engine import KeyEvent, ModalEngine, Mode
from navim.engine.actions import ACTION_HANDLERS, execute_action, get_action_handler
from navim.engine.events import BACKSPACE
from navim.engine.surface import Axis
from tests.helpers import HOME_URL, ctrl, press


class TestScrolling:
    """Scroll commands use the configured delta."""

    def test_scroll_down_and_up(self, engine, surface):
        press(engine, "t")
        assert surface.scroll_offset() == (0, 50)
        press(engine, "tt")
        assert surface.scroll_offset() == (0, 150)
        press(engine, "s")
        assert surface.scroll_offset() == (0, 100)

    def test_scroll_right_and_left(self, engine, surface):
        press(engine, "rr")
        assert surface.scroll_offset() == (100, 0)
        press(engine, "c")
        assert surface.scroll_offset() == (50, 0)

    def test_scroll_clamps_at_top(self, engine, surface):
        press(engine, "s")
        assert surface.scroll_offset() == (0, 0)

    def test_bottom_and_top(self, engine, surface):
        press(engine, "G")
        assert surface.scroll_offset()[1] == surface.scroll_extent(Axis.VERTICAL) == 2400
        press(engine, "gg")
        assert surface.scroll_offset()[1] == 0

    def test_custom_scroll_delta(self, surface):
        engine = ModalEngine(surface, config=NavimConfig(scroll_delta=10))
        press(engine, "t")
        assert surface.scroll_offset() == (0, 10)


class TestControlBindings:
    """Ctrl+key bindings run at once and leave the buffer alone."""

    def test_page_down_scrolls_viewport_minus_delta(self, engine, surface):
        ctrl(engine, "f")
        assert surface.scroll_offset() == (0, 600 - 50)

    def test_page_up(self, engine, surface):
        ctrl(engine, "f")
        ctrl(engine, "f")
        ctrl(engine, "b")
        assert surface.scroll_offset() == (0, 550)

    def test_half_page(self, engine, surface):
        ctrl(engine, "d")
        assert surface.scroll_offset() == (0, 275)
        ctrl(engine, "u")
        assert surface.scroll_offset() == (0, 0)

    def test_buffer_is_untouched(self, engine, surface):
        press(engine, "g")
        ctrl(engine, "f")
        assert engine.command_buffer == "g"
        assert surface.scroll_offset() == (0, 550)

        press(engine, "g")
        assert surface.scroll_offset() == (0, 0)
        assert engine.command_buffer == ""

    def test_unbound_control_key_is_not_consumed(self, engine):
        result = engine.handle_event(KeyEvent("x", ctrl=True))
        assert result.consumed is False

    def test_control_binding_respects_shift(self, engine, surface):
        """Ctrl+Shift+f looks up the "F" control binding, which is unbound."""
        result = engine.handle_event(KeyEvent("f", shift=True, ctrl=True))
        assert result.consumed is False
        assert surface.scroll_offset() == (0, 0)


class TestCommandBuffer:
    """Multi-key sequences accumulate until they match exactly."""

    def test_first_key_of_sequence_waits(self, engine, surface):
        surface.set_scroll_offset(Axis.VERTICAL, 500)
        press(engine, "g")
        assert engine.command_buffer == "g"
        assert surface.scroll_offset()[1] == 500

    def test_sequence_resolves_and_clears(self, engine, surface):
        surface.set_scroll_offset(Axis.VERTICAL, 500)
        press(engine, "gg")
        assert surface.scroll_offset()[1] == 0
        assert engine.command_buffer == ""

    def test_unbound_keys_persist(self, engine):
        press(engine, "xy")
        assert engine.command_buffer == "xy"

    def test_unmatched_buffer_blocks_commands_until_escape(self, engine, surface):
        press(engine, "x")
        press(engine, "t")
        assert engine.command_buffer == "xt"
        assert surface.scroll_offset() == (0, 0)

        engine.handle_event(KeyEvent("escape"))
        press(engine, "t")
        assert surface.scroll_offset() == (0, 50)

    def test_backspace_edits_buffer(self, engine, surface):
        press(engine, "x")
        engine.handle_event(KeyEvent(BACKSPACE))
        assert engine.command_buffer == ""
        press(engine, "t")
        assert surface.scroll_offset() == (0, 50)

    def test_shift_flag_selects_upper_case(self, engine, surface):
        engine.handle_event(KeyEvent("g", shift=True))
        assert surface.scroll_offset()[1] == 2400

    def test_non_character_key_not_consumed(self, engine):
        result = engine.handle_event(KeyEvent("tab"))
        assert result.consumed is False
        assert engine.command_buffer == ""

    def test_command_callback(self, engine):
        updates = []
        engine.set_command_callback(updates.append)
        press(engine, "gg")
        assert updates == ["g", ""]


class TestHistory:
    def test_back_forward(self, engine, surface):
        surface.load("http://site.test/page/1")
        press(engine, "b")
        assert surface.current_url() == HOME_URL
        press(engine, "é")
        assert surface.current_url() == "http://site.test/page/1"

    def test_reload_keeps_url(self, engine, surface):
        press(engine, "e")
        assert surface.current_url() == HOME_URL
        assert surface.history == [HOME_URL]


class TestQuit:
    def test_zz_requests_quit(self, engine):
        result = engine.handle_event(KeyEvent.char("Z"))
        assert result.quit is False
        result = engine.handle_event(KeyEvent.char("Z"))
        assert result.quit is True

    def test_quit_flag_is_not_sticky(self, engine):
        press(engine, "ZZ")
        result = engine.handle_event(KeyEvent.char("t"))
        assert result.quit is False


class TestCustomBindings:
    def test_engine_uses_given_table(self, surface):
        table = default_binding_table().overlay([Binding("j", Action.SCROLL_DOWN)])
        engine = ModalEngine(surface, bindings=table)
        press(engine, "j")
        assert surface.scroll_offset() == (0, 50)


class TestActionRegistry:
    def test_every_action_has_a_handler(self):
        for action in Action:
            assert get_action_handler(action) is not None
        assert set(ACTION_HANDLERS) == set(Action)

    def test_execute_action(self, engine, surface):
        execute_action(Action.SCROLL_TO_BOTTOM, engine)
        assert surface.scroll_offset()[1] == 2400

    def test_execute_action_leaves_mode(self, engine):
        execute_action(Action.INSERT_MODE, engine)
        assert engine.mode == Mode.INSERT
