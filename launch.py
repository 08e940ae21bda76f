import sys

from colorama import Fore, Style, init

from cycle_overlay import __version__
from cycle_overlay.overlay import print_colored

init(autoreset=True)

# key -> (title, hint, color, test mode); None exits
MODES = {
    "1": ("Live", "follow the running game's Prospect.log", Fore.GREEN, False),
    "2": ("Test", "replay a recorded log through the simulator", Fore.YELLOW, True),
    "3": None,
}


def print_menu():
    """List the launch modes, one colored line each."""
    print_colored(f"\nThe Cycle overlay v{__version__}", Fore.CYAN, Style.BRIGHT)
    for key, mode in MODES.items():
        if mode is None:
            print_colored(f"  [{key}] Exit", Fore.RED)
            continue
        title, hint, color, _ = mode
        print_colored(f"  [{key}] {title:<6}", color, end="")
        print_colored(hint, Fore.WHITE, Style.DIM)


def get_user_choice(prompt=input):
    """Ask until one of the menu keys is entered."""
    keys = "/".join(MODES)
    while True:
        try:
            choice = prompt(f"{Fore.CYAN}Mode ({keys}): {Style.RESET_ALL}").strip()
        except (KeyboardInterrupt, EOFError):
            print_colored("\nExiting...", Fore.YELLOW)
            sys.exit(0)
        if choice in MODES:
            return choice
        print_colored(f"Unknown mode {choice!r}", Fore.RED)


def main(argv=None, prompt=input):
    """Main entry point. A log path on the command line skips the menu."""
    from cycle_overlay import live_monitor

    argv = sys.argv[1:] if argv is None else argv
    if argv:
        live_monitor.main(argv)
        return

    print_menu()
    mode = MODES[get_user_choice(prompt)]
    if mode is None:
        print_colored("Goodbye!", Fore.CYAN)
        sys.exit(0)

    title, _, color, test_mode = mode
    print_colored(f"Starting {title.lower()} monitor...", color, Style.BRIGHT)
    live_monitor.main([], test_mode=test_mode)


if __name__ == "__main__":
    main()
