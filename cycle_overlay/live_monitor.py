import logging
import signal
import sys
import threading
import time

from colorama import Fore, Style

from cycle_overlay import webserver
from cycle_overlay.config import *
from cycle_overlay.listener import Listener, wait_for
from cycle_overlay.log_simulator import SimulationManager
from cycle_overlay.overlay import Overlay, print_colored
from cycle_overlay.state import SessionStore

# Global shutdown control
shutdown_event = threading.Event()
signal_received = False


def print_status_header(mode="Production"):
    """Print a status header with current mode."""
    status_color = Fore.GREEN if mode == "Production" else Fore.YELLOW
    print_colored(f"\n{'='*60}", Fore.BLUE)
    print_colored(f"THE CYCLE OVERLAY - {mode.upper()} MODE", status_color, Style.BRIGHT)
    print_colored(f"{'='*60}", Fore.BLUE)


def signal_handler(signum, frame):
    """Signal handler for graceful shutdown."""
    global signal_received
    if signal_received:
        print_colored(f"\nForce exit requested (signal {signum} received again)", Fore.RED)
        sys.exit(1)
    signal_received = True
    print_colored(f"\nReceived signal {signum}. Shutting down...", Fore.YELLOW)
    shutdown_event.set()


def setup_signal_handlers():
    """Setup signal handlers for graceful shutdown."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    if hasattr(signal, 'SIGHUP'):
        signal.signal(signal.SIGHUP, signal_handler)


def monitor_loop(overlay, listener, test_mode=False, simulation_manager=None, show_terminal=True):
    """Presentation loop: apply notifications, export JSON and redraw until shutdown."""
    last_json = 0
    last_term = 0
    while not shutdown_event.is_set():
        now = time.time()
        overlay.pump()

        if not listener.is_running():
            if listener.error is not None:
                logging.error(f"Log listener failed: {listener.error}")
                return 1
            logging.warning("Log listener stopped")
            return 0

        if now - last_json >= UPDATE_INTERVAL:
            overlay.export_json()
            last_json = now

        if show_terminal and now - last_term >= TERMINAL_INTERVAL:
            overlay.print_terminal_snapshot(test_mode)
            if simulation_manager:
                print_colored(f"Simulation: {simulation_manager.get_progress_string()}", Fore.CYAN)
            last_term = now

        shutdown_event.wait(FILE_CHECK_INTERVAL)
    return 0


def main(argv=None, test_mode=False):
    """Run the overlay monitor on the game log (or a simulated one in test mode)."""
    logging.basicConfig(level=getattr(logging, LOG_LEVEL), format=LOG_FORMAT)
    setup_signal_handlers()
    ensure_directories()

    mode = "Test" if test_mode else "Production"
    print_status_header(mode)

    simulation_manager = None
    if test_mode:
        print_colored("Starting background simulation...", Fore.YELLOW)
        simulation_manager = SimulationManager(quiet=True)
        simulation_manager.start()
        wait_for(SIMULATED_LOG_FILE.exists, timeout=5)
        log_path = SIMULATED_LOG_FILE
    else:
        log_path = get_log_path(argv if argv is not None else sys.argv[1:])

    logging.info(f"Game logs path: {log_path}")
    if log_path is None or not log_path.exists():
        logging.error("Game log doesn't exist!")
        sys.exit(1)

    store = SessionStore()
    overlay = Overlay(store)
    listener = Listener(store, overlay)

    webserver.attach_overlay(overlay, OUTPUT_JSON)
    if webserver.start_server():
        print_colored(f"Web server started on http://{WEB_SERVER_HOST}:{WEB_SERVER_PORT}", Fore.GREEN)

    logging.info("Starting log parsers...")
    listener.start(log_path)

    exit_code = 0
    try:
        exit_code = monitor_loop(overlay, listener, test_mode, simulation_manager)
    except KeyboardInterrupt:
        print_colored("\nStopped by user (Ctrl+C).", Fore.YELLOW)
    finally:
        listener.stop()
        if simulation_manager:
            simulation_manager.stop()
        overlay.pump()
        overlay.export_json()
        print_colored("Final overlay state exported to JSON", Fore.GREEN)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
