"""
Unit tests for interrupt handling utilities.
"""

import threading
from unittest.mock import MagicMock, patch

import psutil
import pytest

from gcclink.interrupt_utils import handle_keyboard_interrupt_properly, terminate_process_tree


class TestHandleKeyboardInterrupt:
    """Test suite for handle_keyboard_interrupt_properly."""

    @patch("gcclink.interrupt_utils._thread.interrupt_main")
    def test_main_thread_reraises(self, mock_interrupt_main):
        with pytest.raises(KeyboardInterrupt):
            handle_keyboard_interrupt_properly(KeyboardInterrupt())

        mock_interrupt_main.assert_not_called()

    @patch("gcclink.interrupt_utils._thread.interrupt_main")
    def test_worker_thread_interrupts_main(self, mock_interrupt_main):
        raised = []

        def worker():
            try:
                handle_keyboard_interrupt_properly(KeyboardInterrupt())
            except KeyboardInterrupt:
                raised.append(True)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert raised == [True]
        mock_interrupt_main.assert_called_once()


class TestTerminateProcessTree:
    """Test suite for terminate_process_tree."""

    @patch("gcclink.interrupt_utils.psutil.Process", side_effect=psutil.NoSuchProcess(1))
    def test_missing_root(self, mock_process):
        assert terminate_process_tree(1) == 0

    @patch("gcclink.interrupt_utils.psutil.wait_procs")
    @patch("gcclink.interrupt_utils.psutil.Process")
    def test_children_before_root(self, mock_process, mock_wait):
        order = []
        root = MagicMock(pid=1)
        child = MagicMock(pid=2)
        grandchild = MagicMock(pid=3)
        for proc in (root, child, grandchild):
            proc.terminate.side_effect = lambda p=proc: order.append(p.pid)
        root.children.return_value = [child, grandchild]
        mock_process.return_value = root
        mock_wait.return_value = ([root, child, grandchild], [])

        assert terminate_process_tree(1) == 3
        assert order == [3, 2, 1]
        root.children.assert_called_once_with(recursive=True)

    @patch("gcclink.interrupt_utils.psutil.wait_procs")
    @patch("gcclink.interrupt_utils.psutil.Process")
    def test_stragglers_killed(self, mock_process, mock_wait):
        root = MagicMock(pid=1)
        root.children.return_value = []
        mock_process.return_value = root
        mock_wait.return_value = ([], [root])

        terminate_process_tree(1, timeout=0.1)

        mock_wait.assert_called_once_with([root], timeout=0.1)
        root.kill.assert_called_once()

    @patch("gcclink.interrupt_utils.psutil.wait_procs")
    @patch("gcclink.interrupt_utils.psutil.Process")
    def test_already_exited_child(self, mock_process, mock_wait):
        root = MagicMock(pid=1)
        child = MagicMock(pid=2)
        child.terminate.side_effect = psutil.NoSuchProcess(2)
        root.children.return_value = [child]
        mock_process.return_value = root
        mock_wait.return_value = ([root], [])

        assert terminate_process_tree(1) == 1
