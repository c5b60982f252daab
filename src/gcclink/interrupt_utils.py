"""Utilities for handling KeyboardInterrupt while a tool is running.

When the user interrupts a link, the toolchain driver and everything it
spawned (collect2, ld, LTO plugin workers) must go away too, and the
interrupt must still reach the main thread.
"""

import _thread
import logging
import threading

import psutil


def handle_keyboard_interrupt_properly(ke: KeyboardInterrupt) -> None:
    """Propagate a KeyboardInterrupt to the main thread and re-raise it.

    Usage:
        try:
            process.wait()
        except KeyboardInterrupt as ke:
            terminate_process_tree(process.pid)
            handle_keyboard_interrupt_properly(ke)

    Args:
        ke: The KeyboardInterrupt exception to handle

    Raises:
        KeyboardInterrupt: Always re-raises the exception after handling
    """
    if threading.current_thread() is not threading.main_thread():
        _thread.interrupt_main()
    raise ke


def terminate_process_tree(root_pid: int, timeout: float = 3) -> int:
    """Terminate a process and all of its children.

    Children are terminated before their parents. Processes still alive
    after ``timeout`` seconds are killed.

    Args:
        root_pid: PID of the root process
        timeout: Seconds to wait for graceful termination

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(root_pid)
    except psutil.NoSuchProcess:
        return 0

    try:
        processes = root.children(recursive=True)
    except psutil.NoSuchProcess:
        processes = []
    processes.reverse()
    processes.append(root)

    signalled: list = []
    for proc in processes:
        try:
            proc.terminate()
            signalled.append(proc)
            logging.debug(f"Terminated process {proc.pid}")
        except psutil.NoSuchProcess:
            pass  # Already dead
        except psutil.Error as e:
            logging.warning(f"Failed to terminate process {proc.pid}: {e}")

    _gone, alive = psutil.wait_procs(signalled, timeout=timeout)

    for proc in alive:
        try:
            proc.kill()
            logging.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass
        except psutil.Error as e:
            logging.warning(f"Failed to force kill process {proc.pid}: {e}")

    return len(signalled)
