"""Unit tests for the process guard."""

from __future__ import annotations

import asyncio
import logging
import sys
import threading

import pytest

from trashcan.core.guard import ProcessGuard, active_guard, install_process_guard
from trashcan.funnel import Funnel


@pytest.mark.usefixtures("clean_guard")
class TestInstall:
    def test_install_replaces_hooks(self, funnel: Funnel):
        guard = funnel.install_guard()
        try:
            assert guard.installed
            assert sys.excepthook == guard._excepthook
            assert threading.excepthook == guard._threading_excepthook
            assert active_guard() is guard
        finally:
            guard.uninstall()

    def test_install_is_once_per_process(self, funnel: Funnel):
        first = install_process_guard(funnel.raise_)
        second = install_process_guard(Funnel().raise_)
        try:
            assert first is second
        finally:
            first.uninstall()

    def test_uninstall_restores_previous_hooks(self, funnel: Funnel):
        before_sys = sys.excepthook
        before_threading = threading.excepthook
        guard = funnel.install_guard()
        guard.uninstall()

        assert sys.excepthook is before_sys
        assert threading.excepthook is before_threading
        assert active_guard() is None
        assert not guard.installed


class TestHooks:
    """Drive the hooks directly without installing them process-wide."""

    def test_excepthook_funnels_then_chains(self, funnel: Funnel, received: list):
        chained: list[BaseException] = []
        guard = ProcessGuard(funnel.raise_)
        guard._previous_excepthook = lambda t, e, tb: chained.append(e)

        err = RuntimeError("uncaught")
        guard._excepthook(RuntimeError, err, None)

        assert received == [err]
        assert chained == [err]

    def test_keyboard_interrupt_not_funneled(self, funnel: Funnel, received: list):
        chained: list[BaseException] = []
        guard = ProcessGuard(funnel.raise_)
        guard._previous_excepthook = lambda t, e, tb: chained.append(e)

        interrupt = KeyboardInterrupt()
        guard._excepthook(KeyboardInterrupt, interrupt, None)

        assert received == []
        assert chained == [interrupt]

    def test_thread_exception_is_funneled(self, funnel: Funnel, received: list):
        guard = ProcessGuard(funnel.raise_)
        guard._previous_threading_hook = lambda args: None

        def work():
            raise ValueError("in thread")

        previous = threading.excepthook
        threading.excepthook = guard._threading_excepthook
        try:
            thread = threading.Thread(target=work)
            thread.start()
            thread.join()
        finally:
            threading.excepthook = previous

        assert len(received) == 1
        assert isinstance(received[0], ValueError)

    def test_failing_raise_does_not_break_chain(self):
        chained: list[BaseException] = []

        def broken_raise(error):
            raise RuntimeError("funnel broken")

        guard = ProcessGuard(broken_raise)
        guard._previous_excepthook = lambda t, e, tb: chained.append(e)
        err = OSError("x")
        guard._excepthook(OSError, err, None)
        assert chained == [err]

    def test_watch_loop_funnels_unhandled_task_errors(self, funnel: Funnel, received: list):
        guard = ProcessGuard(funnel.raise_)
        loop = asyncio.new_event_loop()
        try:
            guard.watch_loop(loop)
            err = RuntimeError("task failed")
            loop.call_exception_handler({"message": "Task exception", "exception": err})
        finally:
            loop.close()

        assert received == [err]

    def test_watch_loop_message_only_context(self, funnel: Funnel, received: list):
        guard = ProcessGuard(funnel.raise_)
        loop = asyncio.new_event_loop()
        try:
            guard.watch_loop(loop)
            loop.call_exception_handler({"message": "socket closed"})
        finally:
            loop.close()

        assert len(received) == 1
        assert str(received[0]) == "socket closed"


@pytest.mark.usefixtures("clean_guard")
class TestSecondInstall:
    def test_other_funnel_gets_warning(self, funnel: Funnel, caplog):
        first = funnel.install_guard()
        try:
            with caplog.at_level(logging.WARNING, logger="trashcan.core.guard"):
                second = Funnel().install_guard()
            assert second is first
            assert "another funnel" in caplog.text
        finally:
            first.uninstall()

    def test_same_funnel_reinstall_is_quiet(self, funnel: Funnel, caplog):
        first = funnel.install_guard()
        try:
            with caplog.at_level(logging.WARNING, logger="trashcan.core.guard"):
                assert funnel.install_guard() is first
            assert "another funnel" not in caplog.text
        finally:
            first.uninstall()
