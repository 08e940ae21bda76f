import logging
import re
import threading
from datetime import datetime, timezone

from colorama import Fore, Style

from cycle_overlay.config import (
    SIMULATED_LOG_FILE,
    SIMULATION_CHUNK_SIZE,
    SIMULATION_SPEED,
    TEST_LOGS_DIR,
    ensure_directories,
)

TIMESTAMP_RE = re.compile(r"^\[\d{4}\.\d{2}\.\d{2}-\d{2}\.\d{2}\.\d{2}:\d{3}\]")

SAMPLE_LOG = """\
Log file open, 05/01/23 10:00:00
[2023.05.01-10.00.00:000][  0]LogInit: Display: Starting Game.
[2023.05.01-10.00.05:120][ 12]LogYTravel: UYControllerTravelComponent::TravelToServer m_isMatch [1] sessionId [prospect-eu-0b1f4c9a27d3] region [EU]
[2023.05.01-10.00.05:310][ 13]LogYTravel: Forcing transition to match /Game/Maps/MP/MAP01/Map01_P?SquadSize=3?Region=EU
[2023.05.01-10.00.09:002][ 40]LogHandshake: SendChallengeResponse. Timestamp: 1260.531
[2023.05.01-10.00.11:840][ 61]LogNet: Welcomed by server (Level: /Game/Maps/MP/MAP01/Map01_P, Game: /Script/Prospect.YGameModeMatch)
[2023.05.01-10.00.12:001][ 62]LogYPlayer: OnRep_PlayerMatchState [inMatch]
[2023.05.01-10.00.12:002][ 62]LogYPlayer: OnRep_PlayerMatchState [inMatch]
[2023.05.01-10.00.12:004][ 62]LogYPlayer: OnRep_PlayerMatchState [inMatch]
[2023.05.01-10.00.40:500][201]LogYPlayer: OnRep_PlayerMatchState [inMatch]
[2023.05.01-10.01.02:230][334]LogYPlayer: OnPlayerStateChanged Player state changed for BP_PlayerCharacter_C_2147
[2023.05.01-10.01.30:018][501]LogYActivities: Warning: AA_MeteorShowerSpawner_BP_C_1 spawned meteors
[2023.05.01-10.01.44:777][590]LogYPlayer: AYPlayerCharacter::Destroyed() BP_PlayerCharacter_C_2147
[2023.05.01-10.02.10:400][740]LogYPlayer: OnRep_PlayerMatchState [finished]
[2023.05.01-10.02.10:402][740]LogYInventory: GetInventoryComponentManager | Could not retrieve YGameStateMatch!
[2023.05.01-10.03.00:000][901]LogYActivities: Warning: AC_EvacShip_BP_C_0 called by player
[2023.05.01-10.04.12:650][999]LogYPlayer: AYPlayerState::OnRep_PlayerMatchFinishedResult Result:Dead Damage:Causer:AIChar_Strider_BP_C_2147483 Origin:OriginRow:[WP_E_Pistol_Bullet_01] m_healthDamage:35.500000 Location:X=1.0
[2023.05.01-10.04.20:000][999]LogYTravel: UYControllerTravelComponent::TravelToServer m_isMatch [0] sessionId [] region [EU]
"""


def restamp(line, now=None):
    """Replace the timestamp of a log line with the current UTC time."""
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("[%Y.%m.%d-%H.%M.%S:") + f"{now.microsecond // 1000:03}]"
    return TIMESTAMP_RE.sub(stamp, line, count=1)


class SimulationManager:
    """Replays a recorded game log into a file line by line, as the game would write it."""

    def __init__(self, quiet=False, output_file=SIMULATED_LOG_FILE, speed=SIMULATION_SPEED, live_timestamps=True):
        self.thread = None
        self.stop_flag = threading.Event()
        self.current_progress = 0.0
        self.total_lines = 0
        self.current_line = 0
        self.is_running = False
        self.simulation_complete = False
        self.source_file = None
        self.output_file = output_file
        self.speed = speed
        self.live_timestamps = live_timestamps
        self.quiet = quiet

    def get_progress(self):
        """Get current simulation progress as percentage."""
        return self.current_progress

    def get_progress_string(self):
        """Get a formatted progress string with bar and percentage."""
        if self.total_lines == 0:
            return "Waiting..."

        progress = self.current_progress
        bar_length = 20
        filled = int(bar_length * progress / 100)
        bar = "█" * filled + "░" * (bar_length - filled)
        return f"[{bar}] {progress:5.1f}%"

    def is_complete(self):
        """Check if simulation is complete."""
        return self.simulation_complete

    def start(self, source_file=None):
        """Start the simulation in a separate thread."""
        if source_file is None:
            test_files = get_test_log_files()
            if not test_files:
                self._print_colored(f"No test log files found in {TEST_LOGS_DIR}", Fore.RED)
                self._print_colored("Creating sample test data...", Fore.YELLOW)
                test_files = [self.create_sample_test_data()]
            source_file = test_files[0]

        self.source_file = source_file
        self._print_colored(f"Using test file: {self.source_file.name}", Fore.CYAN)
        self.stop_flag.clear()

        # Create the output file up front so a listener can open it right away
        self.output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_file, 'w', encoding='utf-8') as f:
            f.truncate(0)

        self.thread = threading.Thread(
            target=self._simulate_live_log,
            args=(self.source_file, self.output_file),
            daemon=True
        )
        self.thread.start()

        return True

    def stop(self):
        """Stop the simulation."""
        if self.thread and self.is_running:
            self.stop_flag.set()
            self.thread.join(timeout=5)
            self.is_running = False

    def _print_colored(self, text, color=Fore.WHITE):
        """Print colored text unless running quietly."""
        if not self.quiet:
            print(f"{color}{text}{Style.RESET_ALL}")

    def _simulate_live_log(self, source_file, output_file):
        """
        Simulate a live log by appending lines from the source file
        with a time delay between chunks.
        """
        self.is_running = True
        self.simulation_complete = False

        try:
            with open(source_file, 'r', encoding='utf-8') as f:
                lines = [line.rstrip("\r\n") for line in f if line.strip()]

            self.total_lines = len(lines)
            self._print_colored(f"Loaded {self.total_lines} log lines.", Fore.MAGENTA)
            logging.info(f"Starting simulation from {source_file.name}")

            with open(output_file, 'a', encoding='utf-8') as out:
                self.current_line = 0
                while self.current_line < self.total_lines and not self.stop_flag.is_set():
                    for _ in range(SIMULATION_CHUNK_SIZE):
                        if self.current_line >= self.total_lines:
                            break
                        line = lines[self.current_line]
                        if self.live_timestamps:
                            line = restamp(line)
                        out.write(line + '\n')
                        self.current_line += 1

                    out.flush()  # Ensures data is written to the file system
                    self.current_progress = (self.current_line / self.total_lines) * 100

                    self.stop_flag.wait(self.speed)

        except OSError as e:
            logging.error(f"Simulation error: {e}")
        finally:
            self.is_running = False
            self.simulation_complete = True
            logging.info("Simulation completed.")

    def create_sample_test_data(self):
        """Create sample test data for demonstration."""
        ensure_directories()

        sample_file = TEST_LOGS_DIR / "sample_Prospect.log"
        with open(sample_file, 'w', encoding='utf-8') as f:
            f.write(SAMPLE_LOG)

        self._print_colored(f"Created sample test file: {sample_file}", Fore.GREEN)
        return sample_file


def get_test_log_files():
    """Recorded game logs available for simulation."""
    if not TEST_LOGS_DIR.exists():
        return []
    return sorted(file for file in TEST_LOGS_DIR.glob("*.log") if file.is_file())
